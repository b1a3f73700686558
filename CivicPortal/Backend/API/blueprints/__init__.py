# 🔹 블루프린트 등록
def register_blueprints(app):
    from blueprints.user import api_user_bp
    from blueprints.content_routes import api_content_bp, api_moderation_bp, api_reports_bp
    from blueprints.civic import api_civic_bp
    from blueprints.agency_routes import api_agency_bp
    from blueprints.jobs_routes import api_jobs_bp

    app.register_blueprint(api_user_bp, url_prefix='/user')
    app.register_blueprint(api_content_bp, url_prefix='/content')
    app.register_blueprint(api_moderation_bp, url_prefix='/moderation')
    app.register_blueprint(api_reports_bp, url_prefix='/reports')
    app.register_blueprint(api_civic_bp, url_prefix='/civic')
    app.register_blueprint(api_agency_bp, url_prefix='/agency')
    app.register_blueprint(api_jobs_bp, url_prefix='/jobs')
