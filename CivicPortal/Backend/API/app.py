import atexit
import time
import logging
import log_config
import traceback
import click
from flask import Flask, request, jsonify, make_response
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from config import Config
from extensions import db, jwt, cache
from blueprints import register_blueprints
from celery_app import init_app_for_celery
from utils.errors import ServiceError, validation_error_response
from apscheduler.schedulers.background import BackgroundScheduler
from flasgger import Swagger

SCHEDULER_LOCK_ID = 1234567890

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type, x-session-token',
    'Access-Control-Allow-Methods': 'GET, POST, PUT, DELETE, OPTIONS',
}


def init_scheduler(app):
    try:
        from services.scheduled_jobs import scheduled_maintenance
        with app.app_context():
            lock_acquired = db.session.execute(db.text(f"SELECT pg_try_advisory_lock({SCHEDULER_LOCK_ID})")).scalar()
            if not lock_acquired:
                logging.warning("Another process already holds the scheduler lock")
                return None
            logging.info("Scheduler lock acquired")
            scheduler = BackgroundScheduler()
            scheduler.add_job(scheduled_maintenance, 'interval', args=[app],
                              minutes=app.config.get('ARCHIVE_INTERVAL_MINUTES', 60),
                              max_instances=1, coalesce=True)

            def shutdown():
                with app.app_context():
                    logging.info("Scheduler shutting down")
                    db.session.execute(db.text(f"SELECT pg_advisory_unlock({SCHEDULER_LOCK_ID})"))
                    db.session.commit()
                scheduler.shutdown(wait=False)

            atexit.register(shutdown)
            scheduler.start()
            return scheduler
    except Exception as e:
        logging.error(f"DB connection error: {str(e)}, {traceback.format_exc()}")
        return None


def init_swagger(app):
    app.config['SWAGGER'] = {
        'title': 'Civic Portal API',
        'uiversion': 3
    }
    swagger_config = {
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec_1',
                "route": '/apispec_1.json',
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "swagger_ui": True,
        "specs_route": "/apidocs/",
        "static_url_path": "/flasgger_static"
    }
    swagger_template = {
        "swagger": "2.0",
        "info": {
            "title": "Civic Portal API",
            "description": "Community portal API: listings, moderation, civic organizations, agency search.",
            "version": "1.0.0",
            "termsOfService": ""
        }
    }
    return Swagger(app, config=swagger_config, template=swagger_template)


def register_jwt_callbacks():
    # invite links are signed JWTs too; they must not work as access tokens
    @jwt.token_verification_loader
    def reject_purpose_tokens(jwt_header, jwt_data):
        return jwt_data.get('purpose') is None

    @jwt.token_verification_failed_loader
    def purpose_token_rejected(jwt_header, jwt_data):
        return jsonify({'error': 'Invalid token'}), 401


def register_cli(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo('Database tables created')

    @app.cli.command('seed-agencies')
    @click.option('--path', default=None, help='YAML file with an "agencies" list')
    def seed_agencies_command(path):
        """Insert or update government agencies from the seed file."""
        from services.agency_service import seed_agencies, SEED_FILE
        inserted, updated = seed_agencies(path or SEED_FILE)
        click.echo(f'Agencies seeded: {inserted} inserted, {updated} updated')


def create_app(config_class=Config):
    # Flask 애플리케이션 생성
    app = Flask(__name__)
    app.config.from_object(config_class)
    # JWT 초기화
    jwt.init_app(app)
    register_jwt_callbacks()
    # DB 초기화
    db.init_app(app)
    # Cache 초기화
    cache.init_app(app)
    # Celery 설정
    init_app_for_celery(app)
    # 블루프린트 등록(API 등록)
    register_blueprints(app)
    register_cli(app)
    # 스케줄러 초기화
    if app.config.get('SCHEDULER_ENABLED'):
        init_scheduler(app)
    # swagger
    if app.config.get('ENV') == "development":
        init_swagger(app)

    # 🔹 요청/응답 로깅, CORS
    @app.before_request
    def log_request():
        request._start_time = time.time()
        if request.method == 'OPTIONS':
            return make_response('', 204)
        logging.info(f"Request: {request.method} {request.url} - data: {request.get_json(silent=True)}")

    @app.after_request
    def log_response(response):
        for header, value in CORS_HEADERS.items():
            response.headers[header] = value
        if request.method == 'OPTIONS':
            return response
        duration = time.time() - getattr(request, '_start_time', time.time())
        data = response.get_json(silent=True)
        data_str = str(data) if data else ''
        if len(data_str) > 1000:
            data_str = data_str[:1000] + '...(truncated)'
        logging.info(f"Response: [{request.path}] {response.status_code} - {duration:.3f}s - data: {data_str}")
        return response

    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        db.session.rollback()
        if e.status_code >= 500:
            logging.error(f"Service error: {e.message}, {traceback.format_exc()}")
        else:
            logging.info(f"Request rejected ({e.status_code}): {e.message}")
        return e.to_response()

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        db.session.rollback()
        return validation_error_response(e)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        # 모든 예외를 로깅합니다.
        logging.error(f"Unhandled exception: {str(e)}, {traceback.format_exc()}")
        db.session.rollback()
        return jsonify({"error": str(e)}), 500

    return app
