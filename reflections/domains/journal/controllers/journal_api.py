"""Journal JSON API."""

from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Blueprint, Response, jsonify, request
from flask_jwt_extended import jwt_required
from pydantic import ValidationError

from reflections.core.utils.decorators import csrf_protected
from reflections.core.utils.http import (
    get_request_user,
    get_storage,
    result_response,
    validation_error,
)
from reflections.domains.journal import moods
from reflections.domains.journal.mappers import entry_to_dict, tag_to_dict
from reflections.domains.journal.schemas import (
    EntrySaveRequest,
    JournalEntryData,
    JournalQuery,
    TagCreateRequest,
)
from reflections.domains.journal.services import category_service

journal_api_bp = Blueprint("journal_api", __name__)


def _entries(items):
    return [entry_to_dict(e) for e in items]


def _parse_day(value: Optional[str]) -> Optional[date]:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        return None


def _bad_request(message: str):
    return jsonify({"ok": False, "error": message}), 400


def _entry_from_payload(payload: dict, entry_id: Optional[str] = None) -> JournalEntryData:
    data = EntrySaveRequest.model_validate(payload)
    fields = data.model_dump(exclude_none=True)
    if entry_id is not None:
        fields["id"] = entry_id
    return JournalEntryData.model_validate(fields)


# --- entries ---


@journal_api_bp.get("/entries")
@jwt_required()
def list_entries():
    storage = get_storage()
    user = get_request_user()
    args = request.args
    if "mood" in args:
        result = storage.get_entries_by_mood(user, args["mood"])
    elif "year" in args or "month" in args:
        year = args.get("year", type=int)
        month = args.get("month", type=int)
        if year is None or month is None:
            return _bad_request("year and month must both be integers")
        result = storage.get_entries_by_month(user, year, month)
    elif "q" in args:
        result = storage.search_entries(user, args["q"])
    else:
        result = storage.get_all_entries(user)
    return result_response(result, "items", _entries)


@journal_api_bp.get("/entries/query")
@jwt_required()
def query_entries():
    try:
        query = JournalQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return validation_error(exc)
    result = get_storage().query_entries(get_request_user(), query)
    if not result.success:
        return result_response(result, "items")
    page = result.data
    return jsonify(
        {
            "ok": True,
            "items": _entries(page.items),
            "total": page.total_count,
            "page": page.page_number,
            "page_size": page.page_size,
            "pages": page.total_pages,
        }
    )


@journal_api_bp.get("/entries/<key>")
@jwt_required()
def get_entry(key: str):
    """Look an entry up by ISO date, or by id when ``key`` is not a date."""
    storage = get_storage()
    user = get_request_user()
    day = _parse_day(key)
    result = storage.get_entry_by_date(user, day) if day else storage.get_entry(user, key)
    if result.success and result.data is None:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return result_response(result, "entry", entry_to_dict)


@journal_api_bp.post("/entries")
@jwt_required()
@csrf_protected
def create_entry():
    payload = request.get_json(silent=True) or {}
    try:
        entry = _entry_from_payload(payload)
    except ValidationError as exc:
        return validation_error(exc)
    result = get_storage().save_entry(get_request_user(), entry)
    return result_response(result, "entry", entry_to_dict, status=201)


@journal_api_bp.put("/entries/<entry_id>")
@jwt_required()
@csrf_protected
def update_entry(entry_id: str):
    storage = get_storage()
    user = get_request_user()
    current = storage.get_entry(user, entry_id)
    if not current.success:
        return result_response(current, "entry")
    if current.data is None:
        return jsonify({"ok": False, "error": "not_found"}), 404
    payload = request.get_json(silent=True) or {}
    payload.setdefault("entry_date", current.data.entry_date.isoformat() if current.data.entry_date else None)
    try:
        entry = _entry_from_payload(payload, entry_id=entry_id)
    except ValidationError as exc:
        return validation_error(exc)
    return result_response(storage.save_entry(user, entry), "entry", entry_to_dict)


@journal_api_bp.delete("/entries/<entry_id>")
@jwt_required()
@csrf_protected
def delete_entry(entry_id: str):
    user = get_request_user()
    if user is None:
        return jsonify({"ok": False, "error": "User not authenticated"}), 401
    return result_response(get_storage().delete_entry(entry_id, user=user), "deleted")


# --- tags ---


@journal_api_bp.get("/tags")
@jwt_required()
def list_tags():
    result = get_storage().get_all_tags(get_request_user())
    return result_response(result, "items", lambda tags: [tag_to_dict(t) for t in tags])


@journal_api_bp.post("/tags")
@jwt_required()
@csrf_protected
def create_tag():
    payload = request.get_json(silent=True) or {}
    try:
        data = TagCreateRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    result = get_storage().add_tag(get_request_user(), data.name, data.color)
    return result_response(result, "tag", tag_to_dict, status=201)


# --- statistics and export ---


@journal_api_bp.get("/stats")
@jwt_required()
def statistics():
    result = get_storage().get_statistics(get_request_user())
    return result_response(result, "stats", lambda stats: stats.model_dump())


@journal_api_bp.get("/stats/count")
@jwt_required()
def entry_count():
    start = _parse_day(request.args.get("start"))
    end = _parse_day(request.args.get("end"))
    if start is None or end is None:
        return _bad_request("start and end must be ISO dates")
    result = get_storage().get_entry_count(get_request_user(), start, end)
    return result_response(result, "count")


@journal_api_bp.get("/stats/words")
@jwt_required()
def word_count():
    return result_response(get_storage().get_total_word_count(get_request_user()), "words")


@journal_api_bp.get("/export")
@jwt_required()
def export():
    result = get_storage().export_entries(get_request_user())
    if not result.success:
        return result_response(result, "export")
    return Response(
        result.data,
        mimetype="application/json",
        headers={"Content-Disposition": f"attachment; filename=journal-{date.today().isoformat()}.json"},
    )


# --- catalogues ---


@journal_api_bp.get("/moods")
def list_moods():
    grouped = moods.moods_by_category()
    return jsonify(
        {
            "ok": True,
            "moods": moods.all_moods(),
            "categories": grouped,
            "colors": {category: moods.category_color(category) for category in grouped},
        }
    )


@journal_api_bp.get("/categories")
def list_categories():
    category_type = request.args.get("type")
    if category_type:
        result = category_service.get_categories_by_type(category_type)
    else:
        result = category_service.get_all_categories()
    if not result.success:
        return jsonify({"ok": False, "error": result.error}), 404
    return jsonify({"ok": True, "items": result.data, "types": category_service.get_category_types()})
