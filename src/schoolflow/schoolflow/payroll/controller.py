from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok, optional_date
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    generator = container.payroll_generator
    lifecycle = container.payroll_lifecycle

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="generate_payroll")
    @json_endpoint
    def generate_payroll():
        data = json_body()
        staff_ids = data.get("staff_ids")
        if staff_ids is not None and not isinstance(staff_ids, list):
            raise ValidationError("staff_ids must be a list")
        result = generator.generate_payroll(data.get("period", ""), staff_ids or None)
        return ok(result.as_dict())

    @app.route("/api/payroll/slips", methods=["GET"], endpoint="list_slips")
    @json_endpoint
    def list_slips():
        slips = lifecycle.list_slips(request.args.get("period", ""))
        return ok({"slips": [s.as_dict() for s in slips]})

    @app.route("/api/payroll/slips/<slip_id>", methods=["GET"], endpoint="get_slip")
    @json_endpoint
    def get_slip(slip_id: str):
        return ok({"slip": lifecycle.get_slip(slip_id).as_dict()})

    @app.route("/api/payroll/slips/<slip_id>/refresh", methods=["POST"], endpoint="refresh_slip")
    @json_endpoint
    def refresh_slip(slip_id: str):
        return ok({"slip": lifecycle.refresh_slip(slip_id).as_dict()})

    @app.route("/api/payroll/slips/<slip_id>/pay", methods=["POST"], endpoint="pay_slip")
    @json_endpoint
    def pay_slip(slip_id: str):
        data = json_body()
        slip = lifecycle.mark_paid(slip_id, today=optional_date(data.get("payment_date"), "Payment date"))
        return ok({"slip": slip.as_dict()})

    @app.route("/api/payroll/slips/<slip_id>", methods=["DELETE"], endpoint="delete_slip")
    @json_endpoint
    def delete_slip(slip_id: str):
        return ok({"released_adjustments": lifecycle.delete_slip(slip_id)})

    @app.route(
        "/api/payroll/slips/<slip_id>/adjustments/<adjustment_id>/detach",
        methods=["POST"],
        endpoint="detach_slip_adjustment",
    )
    @json_endpoint
    def detach_slip_adjustment(slip_id: str, adjustment_id: str):
        data = json_body()
        detached = lifecycle.detach_adjustment_from_slip(slip_id, adjustment_id, data.get("mode"))
        slip = lifecycle.refresh_slip(slip_id)
        return ok(
            {
                "slip": slip.as_dict(),
                "adjustment": detached.as_dict() if detached else None,
            }
        )
