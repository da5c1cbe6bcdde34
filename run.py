# run.py
import logging
import os

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
# 실행 위치와 관계없이 프로젝트 루트의 .env 파일을 로드합니다.
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from travelhub import create_app  # noqa: E402

app = create_app(os.getenv('FLASK_ENV'))

if __name__ == '__main__':
    server_host = os.getenv('FLASK_RUN_HOST', '127.0.0.1')
    server_port = int(os.getenv('FLASK_RUN_PORT', 5000))
    logging.info(f"TravelHub API listening on {server_host}:{server_port} (db={app.config['MONGO_DB_NAME']})")
    app.run(host=server_host, port=server_port, debug=app.config.get('DEBUG', False))
