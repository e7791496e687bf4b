"""Media article routes."""
from flask import Blueprint, current_app, jsonify, request

from app.routes.helpers import (
    done_response,
    item_response,
    json_body,
    list_response,
    parse_bool,
    parse_int,
)
from app.services import get_services

media_bp = Blueprint('media', __name__)


@media_bp.route('/media', methods=['GET'])
def get_articles():
    """Get media articles, newest first.

    Query Parameters:
        status: published, draft or pending
        category, project_id, news_channel, media_type: single-field filters
        q: Search term over title, description and category
        page, page_size: Return one page with a total count instead
    """
    service = get_services().media
    args = request.args
    if args.get('page'):
        page = parse_int(args.get('page'), 1)
        page_size = parse_int(args.get('page_size'), current_app.config['DEFAULT_PAGE_SIZE'])
        result = service.get_articles_page(page, page_size, args.get('status'))
        return jsonify({'data': result['data'], 'count': len(result['data']),
                        'total': result['total'], 'page': page})
    if args.get('q'):
        return list_response(service.search_articles(args['q']))
    if args.get('category'):
        return list_response(service.get_articles_by_category(args['category']))
    if args.get('project_id'):
        return list_response(service.get_articles_by_project(args['project_id']))
    if args.get('news_channel'):
        return list_response(service.get_articles_by_news_channel(args['news_channel']))
    if args.get('media_type'):
        return list_response(service.get_articles_by_media_type(args['media_type']))
    return list_response(service.list_articles(args.get('status')))


@media_bp.route('/media/popular', methods=['GET'])
def get_popular_articles():
    limit = parse_int(request.args.get('limit'), 5)
    return list_response(get_services().media.get_popular_articles(limit))


@media_bp.route('/media/stats', methods=['GET'])
def article_stats():
    return jsonify({'data': get_services().media.get_article_stats()})


@media_bp.route('/media/<id>', methods=['GET'])
def get_article(id: str):
    return item_response(get_services().media.get_article(id), 'Article')


@media_bp.route('/media', methods=['POST'])
def create_article():
    article = get_services().media.create_article(json_body())
    if article is None:
        return jsonify({'error': 'Article could not be created'}), 502
    return jsonify({'data': article}), 201


@media_bp.route('/media/<id>', methods=['PUT'])
def update_article(id: str):
    return item_response(get_services().media.update_article(id, json_body()), 'Article')


@media_bp.route('/media/<id>/publish', methods=['POST'])
def publish_article(id: str):
    """Request Body (JSON, optional): publish (default true)."""
    data = request.get_json(silent=True) or {}
    publish = data.get('publish', True)
    if isinstance(publish, str):
        publish = parse_bool(publish, True)
    ok = get_services().media.publish_article(id, bool(publish))
    return done_response(ok, 'Article', 'Article published' if publish else 'Article unpublished')


@media_bp.route('/media/<id>/approve', methods=['POST'])
def approve_article(id: str):
    """Request Body (JSON): approved_by, approval_date (optional)."""
    data = json_body()
    if not data.get('approved_by'):
        raise ValueError('approved_by is required')
    ok = get_services().media.approve_article(id, data['approved_by'], data.get('approval_date'))
    return done_response(ok, 'Article', 'Article approved')


@media_bp.route('/media/<id>/views', methods=['POST'])
def record_view(id: str):
    return done_response(get_services().media.increment_views(id), 'Article', 'View recorded')


@media_bp.route('/media/<id>/downloads', methods=['POST'])
def record_download(id: str):
    ok = get_services().media.increment_downloads(id)
    return done_response(ok, 'Article', 'Download recorded')


@media_bp.route('/media/<id>', methods=['DELETE'])
def delete_article(id: str):
    deleted = get_services().media.delete_article(id)
    return done_response(deleted, 'Article', 'Article deleted successfully')


@media_bp.route('/media/bulk-delete', methods=['POST'])
def delete_articles():
    """Request Body (JSON): ids (list of article ids)."""
    ids = json_body().get('ids')
    if not isinstance(ids, list):
        raise ValueError('ids must be a list')
    if not get_services().media.delete_articles(ids):
        return jsonify({'error': 'Articles could not be deleted'}), 502
    return jsonify({'message': 'Articles deleted successfully'})
