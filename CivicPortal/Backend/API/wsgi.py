from gevent import monkey
monkey.patch_all()  # gevent 워커 사용을 위한 패치 (다른 import 보다 먼저)

from app import create_app  # noqa: E402

# gunicorn -k gevent wsgi:app
app = create_app()
