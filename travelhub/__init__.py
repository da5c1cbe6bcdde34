# travelhub/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (설정 클래스가 os.getenv 를 읽기 전에 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import logging
import os
from typing import Optional

from flask import Flask
from marshmallow import ValidationError
from pymongo.database import Database
from pymongo.errors import ConnectionFailure
from werkzeug.exceptions import HTTPException

# - 설정 / 핵심 모듈
from travelhub.core.config import config_by_name
from travelhub.core.database import init_db
from travelhub.core.exceptions import ServiceUnavailableError, TravelHubError
from travelhub.core.security import jwt
from travelhub.utils.responses import api_response, error_response

# - API 블루프린트
from travelhub.api.auth.routes import auth_bp
from travelhub.api.trips.routes import trips_bp
from travelhub.api.posts.routes import posts_bp
from travelhub.api.comments.routes import comments_bp
from travelhub.api.users.routes import users_bp

# - 서비스 모듈
from travelhub.api.auth.services import AuthService
from travelhub.api.trips.services import TripService
from travelhub.api.posts.services import PostService
from travelhub.api.comments.services import CommentService
from travelhub.api.users.services import UserService


def create_app(config_name: Optional[str] = None, db: Optional[Database] = None) -> Flask:
    """
    Flask 애플리케이션 팩토리 함수.
    :param config_name: 'development' / 'testing' / 'production'. 없으면 FLASK_ENV 를 사용합니다.
    :param db: 미리 만들어 둔 데이터베이스 핸들 (테스트에서는 mongomock).
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt.init_app(app)
    database = init_db(app, db)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 서비스 먼저 생성
    app.services['auth'] = AuthService(database)
    app.services['trips'] = TripService(database)
    app.services['posts'] = PostService(
        database,
        not_interested_policy=app.config['FEED_NOT_INTERESTED_POLICY'],
        boost_interested=app.config['FEED_BOOST_INTERESTED'],
        trending_candidate_limit=app.config['TRENDING_CANDIDATE_LIMIT']
    )

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['comments'] = CommentService(post_service=app.services['posts'])
    app.services['users'] = UserService(database, post_service=app.services['posts'])
    logging.info("Domain services initialized successfully")

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(trips_bp, url_prefix='/api/trips')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    # 댓글/답글은 게시글 하위 경로(/api/posts/<id>/comment...)를 사용합니다.
    app.register_blueprint(comments_bp, url_prefix='/api/posts')
    app.register_blueprint(users_bp, url_prefix='/api/users')

    @app.route('/health', methods=['GET'])
    def health():
        return api_response({"status": "ok"}, message="TravelHub API is running")

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return error_response("VALIDATION_ERROR", "입력값이 올바르지 않습니다.", 400, details=err.messages)

    @app.errorhandler(TravelHubError)
    def handle_travelhub_error(err):
        return error_response(err.error_code, err.message, err.status_code)

    @app.errorhandler(ConnectionFailure)
    def handle_database_unavailable(err):
        logging.error(f"Database connection failed: {err}", exc_info=True)
        unavailable = ServiceUnavailableError()
        return error_response(unavailable.error_code, unavailable.message, unavailable.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        error_code = (err.name or "HTTP_ERROR").upper().replace(' ', '_')
        return error_response(error_code, err.description, err.code)

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        message = str(err) if app.debug else "서버 내부에서 예상치 못한 오류가 발생했습니다."
        return error_response("INTERNAL_SERVER_ERROR", message, 500)

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
