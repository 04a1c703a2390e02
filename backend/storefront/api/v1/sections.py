# storefront/api/v1/sections.py
from flask import current_app, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from storefront.application.sections.create_section import create_section
from storefront.application.sections.update_section import update_section
from storefront.application.sections.reorder_sections import reorder_sections
from storefront.application.sections.delete_section import delete_section
from storefront.application.sections.list_sections import (
    get_section,
    list_public_sections,
    list_sections,
)
from storefront.domain.exceptions import NotFound, ValidationError
from storefront.homepage.records import SectionRecord
from storefront.homepage.resolver import SectionDataResolver
from storefront.homepage.sources import ModelCatalogSource
from storefront.extensions import db
from storefront.models.homepage_section import HomepageSection
from storefront.normalizers.section import normalize_section
from storefront.utils.decorators import roles_required
from storefront.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp


def _query_flag(name):
    raw = request.args.get(name)
    if raw is None:
        return None
    return raw.lower() in ("true", "1")


def _no_cache(response):
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


# ------------------------
# Public
# ------------------------

@v1_bp.route("/sections/public", methods=["GET"])
def list_public():
    sections = list_public_sections()
    return _no_cache(jsonify([normalize_section(s) for s in sections]))


@v1_bp.route("/sections/<section_id>/data/public", methods=["GET"])
async def section_data_public(section_id):
    section = get_section(section_id, public=True)
    return jsonify(await _resolve(section))


# ------------------------
# Admin
# ------------------------

@v1_bp.route("/sections", methods=["GET"])
@jwt_required()
@roles_required("admin")
def list_all():
    sections = list_sections(
        section_type=request.args.get("type"),
        is_active=_query_flag("active"),
        is_published=_query_flag("published"),
    )
    return jsonify([normalize_section(s, admin=True) for s in sections])


@v1_bp.route("/sections/<section_id>", methods=["GET"])
@jwt_required()
@roles_required("admin")
def get_one(section_id):
    return jsonify(normalize_section(get_section(section_id), admin=True))


@v1_bp.route("/sections", methods=["POST"])
@jwt_required()
@roles_required("admin")
def create():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    section = create_section(actor_id=get_jwt_identity(), data=data)
    return jsonify(normalize_section(section, admin=True)), 201


@v1_bp.route("/sections/reorder", methods=["PATCH"])
@jwt_required()
@roles_required("admin")
def reorder():
    data = request.get_json(silent=True) or {}
    items = data.get("order") if isinstance(data, dict) else None

    if not isinstance(items, list):
        raise ValidationError("Order must be an array")

    updated = reorder_sections(items=items, actor_id=get_jwt_identity())
    return jsonify({"message": "Sections reordered successfully", "updated": updated})


@v1_bp.route("/sections/<section_id>", methods=["PUT"])
@jwt_required()
@roles_required("admin")
def update(section_id):
    existing = db.session.get(HomepageSection, section_id)
    if existing is None:
        raise NotFound("Section not found")

    enforce_optimistic_lock(existing)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    section = update_section(section_id=section_id, actor_id=get_jwt_identity(), data=data)
    return jsonify(normalize_section(section, admin=True))


@v1_bp.route("/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def delete(section_id):
    delete_section(section_id=section_id)
    return jsonify({"message": "Section deleted successfully"})


@v1_bp.route("/sections/<section_id>/data", methods=["GET"])
@jwt_required()
@roles_required("admin")
async def section_data(section_id):
    section = get_section(section_id)
    return jsonify(await _resolve(section))


async def _resolve(section):
    record = SectionRecord.model_validate(normalize_section(section))
    resolver = SectionDataResolver(
        ModelCatalogSource(),
        viewport=request.args.get("viewport", current_app.config["HOMEPAGE_VIEWPORT"]),
    )
    payload = await resolver.resolve_data(record)
    return payload or {}
