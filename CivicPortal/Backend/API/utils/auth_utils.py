from flask import request

SESSION_TOKEN_HEADER = 'x-session-token'

#region civic organization session token from the request header
def get_session_token():
    token = request.headers.get(SESSION_TOKEN_HEADER, '').strip()
    return token or None
#endregion
