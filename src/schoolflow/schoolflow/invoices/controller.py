from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok, optional_date
from ..container import Container
from ..core.enums import DocumentStatus


def register(app: Flask, container: Container) -> None:
    generator = container.invoice_generator
    lifecycle = container.invoice_lifecycle

    @app.route("/api/invoices/generate", methods=["POST"], endpoint="generate_invoices")
    @json_endpoint
    def generate_invoices():
        data = json_body()
        result = generator.generate_invoices(
            data.get("period", ""),
            student_id=data.get("student_id") or None,
            today=optional_date(data.get("today"), "Today"),
        )
        return ok(result.as_dict())

    @app.route("/api/invoices/ad-hoc", methods=["POST"], endpoint="create_ad_hoc_invoice")
    @json_endpoint
    def create_ad_hoc_invoice():
        data = json_body()
        invoice = generator.create_ad_hoc_invoice(
            student_id=data.get("student_id", ""),
            type=data.get("type"),
            amount=data.get("amount"),
            description=data.get("description", ""),
            due_date=optional_date(data.get("due_date"), "Due date"),
            status=data.get("status") or DocumentStatus.PENDING,
        )
        return ok({"invoice": invoice.as_dict()}, 201)

    @app.route("/api/students/<student_id>/charges", methods=["POST"], endpoint="add_student_charge")
    @json_endpoint
    def add_student_charge(student_id: str):
        data = json_body()
        outcome = generator.queue_or_merge_student_charge(
            student_id=student_id,
            type=data.get("type"),
            amount=data.get("amount"),
            description=data.get("description", ""),
            effective_date=optional_date(data.get("effective_date"), "Effective date"),
        )
        return ok(outcome.as_dict(), 201)

    @app.route("/api/invoices", methods=["GET"], endpoint="list_invoices")
    @json_endpoint
    def list_invoices():
        invoices = lifecycle.list_invoices(
            student_id=request.args.get("student_id") or None,
            period=request.args.get("period") or None,
        )
        return ok({"invoices": [i.as_dict() for i in invoices]})

    @app.route("/api/invoices/<invoice_id>", methods=["GET"], endpoint="get_invoice")
    @json_endpoint
    def get_invoice(invoice_id: str):
        return ok({"invoice": lifecycle.get_invoice(invoice_id).as_dict()})

    @app.route("/api/invoices/<invoice_id>/pay", methods=["POST"], endpoint="pay_invoice")
    @json_endpoint
    def pay_invoice(invoice_id: str):
        data = json_body()
        invoice = lifecycle.mark_paid(invoice_id, today=optional_date(data.get("payment_date"), "Payment date"))
        return ok({"invoice": invoice.as_dict()})

    @app.route("/api/invoices/<invoice_id>", methods=["DELETE"], endpoint="delete_invoice")
    @json_endpoint
    def delete_invoice(invoice_id: str):
        released = lifecycle.delete_invoice(invoice_id)
        return ok({"released_adjustments": released})
