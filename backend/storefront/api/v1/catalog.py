# storefront/api/v1/catalog.py
from flask import request, jsonify
from storefront.catalog import queries
from . import v1_bp


@v1_bp.route("/sliders", methods=["GET"])
def sliders():
    return jsonify(queries.list_sliders())


@v1_bp.route("/categories", methods=["GET"])
def categories():
    return jsonify(queries.list_categories())


@v1_bp.route("/departments", methods=["GET"])
def departments():
    return jsonify(queries.list_departments())


@v1_bp.route("/products", methods=["GET"])
def products():
    return jsonify(queries.list_products(request.args.to_dict()))


@v1_bp.route("/subcategories", methods=["GET"])
def subcategories():
    return jsonify(queries.list_subcategories(request.args.get("categoryId")))


@v1_bp.route("/banners", methods=["GET"])
def banners():
    return jsonify(queries.list_banners())


@v1_bp.route("/banners/detail/<banner_id>", methods=["GET"])
def banner_detail(banner_id):
    return jsonify(queries.get_banner(banner_id))


@v1_bp.route("/video-banners/public", methods=["GET"])
def video_banners():
    return jsonify(queries.list_video_banners())


@v1_bp.route("/brands/public", methods=["GET"])
def brands():
    return jsonify(queries.list_brands())
