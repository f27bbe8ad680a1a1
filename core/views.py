"""JSON views for the chart dashboard.

The browser client posts an already-parsed spreadsheet (headers + row objects)
together with its current selections; the views answer with the derived
dashboard state computed by the pure `analysis` layer. The endpoints keep no
session or auth state, so they are exempt from CSRF checks.
"""

from __future__ import annotations

import json
import logging

from django import forms
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from analysis.inference import allowed_x_axes, allowed_y_axes, infer_header_types
from core.forms import ChartSelectionForm, DatasetForm
from core.services import compute_dashboard_state, dashboard_config_from_settings

logger = logging.getLogger(__name__)


def _json_body(request: HttpRequest) -> dict[str, object] | None:
    """Decode a JSON object request body, returning None when malformed."""

    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _form_errors(form: forms.Form) -> dict[str, list[str]]:
    return {field: [error["message"] for error in errors] for field, errors in form.errors.get_json_data().items()}


def _bad_request(errors: dict[str, list[str]]) -> JsonResponse:
    logger.warning("Rejected dashboard payload: %s", errors)
    return JsonResponse({"errors": errors}, status=400)


@csrf_exempt
@require_POST
def column_types_api(request: HttpRequest) -> JsonResponse:
    """Return inferred column types and the axis menus for a dataset."""

    payload = _json_body(request)
    if payload is None:
        return _bad_request({"__all__": ["Request body must be a JSON object."]})

    form = DatasetForm(data=payload)
    if not form.is_valid():
        return _bad_request(_form_errors(form))

    config = dashboard_config_from_settings()
    header_types = infer_header_types(
        form.to_dataset(),
        sample_size=config.sample_size,
        threshold=config.numeric_threshold,
    )
    return JsonResponse(
        {
            "headerTypes": {header: semantic_type.value for header, semantic_type in header_types.items()},
            "allowedXAxes": list(allowed_x_axes(header_types)),
            "allowedYAxes": list(allowed_y_axes(header_types)),
        }
    )


@csrf_exempt
@require_POST
def dashboard_api(request: HttpRequest) -> JsonResponse:
    """Return the full dashboard state (menus, availability, geometry) for a selection."""

    payload = _json_body(request)
    if payload is None:
        return _bad_request({"__all__": ["Request body must be a JSON object."]})

    form = ChartSelectionForm(data=payload)
    if not form.is_valid():
        return _bad_request(_form_errors(form))

    state = compute_dashboard_state(
        form.to_dataset(),
        x_axis=form.cleaned_data["x_axis"],
        y_axis=form.cleaned_data["y_axis"],
        z_axis=form.cleaned_data["z_axis"],
        chart_type=form.selected_chart_type(),
    )
    return JsonResponse(state.as_json())
