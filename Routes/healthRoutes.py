from flask import Blueprint
from Controllers.healthController import api_status, health_check

health_routes = Blueprint('health_routes', __name__, url_prefix='/api')

health_routes.add_url_rule('', view_func=api_status, methods=['GET'])
health_routes.add_url_rule('/health', view_func=health_check, methods=['GET'])
