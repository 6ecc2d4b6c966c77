import logging
from uuid import uuid4

from flask import Flask, jsonify, request, session

from debt_engine.cash_flow import debt_expenses_for_cash_flow
from debt_engine.config import MAX_SCHEDULE_ROWS, configure_logging, secret_key
from debt_engine.data_models import MODE_INSTALLMENT
from debt_engine.engine import calculate_amortization, preview_installment
from debt_engine.exceptions import DebtNotFoundError, InvalidDebtError
from debt_engine.serialization import (
    debt_from_dict,
    debt_to_dict,
    extra_payment_from_dict,
    serialize_cash_flow_item,
    serialize_portfolio,
    serialize_schedule,
    serialize_simulation,
    serialize_summary,
)
from debt_engine.simulator import compare_simulation, next_installment_extra, simulate
from debt_engine.summary import portfolio_totals, summarize
from debt_engine.utils import decimal_from_str
from debt_engine.validation import validate_debt, validate_extra_payment
from debt_engine_web.debt_store import DebtStore, create_store_from_env

logger = logging.getLogger(__name__)


def _ensure_user_token() -> str:
    token = session.get("user_token")
    if not token:
        token = uuid4().hex
        session["user_token"] = token
        session.modified = True
    return token


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidDebtError("body", "Request body must be a JSON object")
    return data


def _schedule_view(schedule: list, show_full_schedule: bool) -> dict:
    """Serialize a schedule, keeping only the first rows unless asked otherwise."""
    if show_full_schedule or len(schedule) <= MAX_SCHEDULE_ROWS:
        return {"schedule": serialize_schedule(schedule)}
    return {
        "schedule": serialize_schedule(schedule[:MAX_SCHEDULE_ROWS]),
        "truncated": len(schedule) - MAX_SCHEDULE_ROWS,
    }


def _hypothetical_extra(debt, data: dict):
    if data.get("installment") is None:
        try:
            amount = decimal_from_str(str(data.get("amount")))
        except ValueError as exc:
            raise InvalidDebtError("amount", str(exc)) from exc
        extra = next_installment_extra(debt, amount, data.get("mode") or MODE_INSTALLMENT)
    else:
        extra = extra_payment_from_dict(data)
    validate_extra_payment(extra, debt.total_installments)
    return extra


def _debt_analysis(debt, show_full_schedule: bool) -> dict:
    schedule = calculate_amortization(debt)
    payload = {
        "summary": serialize_summary(summarize(debt)),
        "installment": float(preview_installment(
            debt.original_amount, debt.annual_rate, debt.total_installments, debt.installment_period
        ) or 0),
    }
    payload.update(_schedule_view(schedule, show_full_schedule))
    return payload


def create_app(store: DebtStore = None) -> Flask:
    app = Flask(__name__)
    app.secret_key = secret_key()
    app.config["DEBT_STORE"] = store or create_store_from_env()

    def debt_store() -> DebtStore:
        return app.config["DEBT_STORE"]

    @app.errorhandler(InvalidDebtError)
    def invalid_debt(exc):
        logger.info("Rejected request: %s", exc)
        return jsonify({"error": exc.message, "field": exc.field}), 400

    @app.errorhandler(DebtNotFoundError)
    def debt_not_found(exc):
        return jsonify({"error": exc.message}), 404

    @app.post("/api/preview")
    def preview():
        """Schedule and summary of a debt that has not been saved yet."""
        data = _json_body()
        debt = validate_debt(debt_from_dict(data, debt_id="preview"))
        return jsonify(_debt_analysis(debt, bool(data.get("show_full_schedule"))))

    @app.post("/api/simulate")
    def simulate_unsaved():
        data = _json_body()
        debt = validate_debt(debt_from_dict(data.get("debt") or {}, debt_id="preview"))
        extra = _hypothetical_extra(debt, data.get("extra") or {})
        payload = serialize_simulation(compare_simulation(debt, extra))
        payload.update(_schedule_view(simulate(debt, extra), bool(data.get("show_full_schedule"))))
        return jsonify(payload)

    @app.get("/api/debts")
    def list_debts():
        user_token = _ensure_user_token()
        debts = debt_store().list(user_token)
        return jsonify(
            [dict(debt_to_dict(d), summary=serialize_summary(summarize(d))) for d in debts]
        )

    @app.post("/api/debts")
    def create_debt():
        user_token = _ensure_user_token()
        debt = debt_store().create(user_token, debt_from_dict(_json_body(), debt_id=None))
        return jsonify(debt_to_dict(debt)), 201

    @app.get("/api/debts/<debt_id>")
    def get_debt(debt_id: str):
        debt = debt_store().get(session.get("user_token"), debt_id)
        payload = debt_to_dict(debt)
        payload.update(_debt_analysis(debt, request.args.get("full") == "1"))
        return jsonify(payload)

    @app.put("/api/debts/<debt_id>")
    def update_debt(debt_id: str):
        debt = debt_from_dict(_json_body(), debt_id=debt_id)
        updated = debt_store().update(session.get("user_token"), debt_id, debt)
        return jsonify(debt_to_dict(updated))

    @app.delete("/api/debts/<debt_id>")
    def delete_debt(debt_id: str):
        debt_store().delete(session.get("user_token"), debt_id)
        return "", 204

    @app.get("/api/debts/<debt_id>/summary")
    def debt_summary(debt_id: str):
        debt = debt_store().get(session.get("user_token"), debt_id)
        return jsonify(serialize_summary(summarize(debt)))

    @app.post("/api/debts/<debt_id>/simulate")
    def simulate_saved(debt_id: str):
        debt = debt_store().get(session.get("user_token"), debt_id)
        extra = _hypothetical_extra(debt, _json_body())
        return jsonify(serialize_simulation(compare_simulation(debt, extra)))

    @app.post("/api/debts/<debt_id>/cash-flow")
    def debt_cash_flow(debt_id: str):
        """Expense line of a debt for the requested (month, year) periods."""
        debt = debt_store().get(session.get("user_token"), debt_id)
        try:
            periods = [(int(p["month"]), int(p["year"])) for p in _json_body().get("periods") or []]
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidDebtError("periods", "Periods must be objects with month and year") from exc
        item = debt_expenses_for_cash_flow(debt, periods)
        return jsonify(serialize_cash_flow_item(item) if item else None)

    @app.get("/api/portfolio")
    def portfolio():
        user_token = _ensure_user_token()
        return jsonify(serialize_portfolio(portfolio_totals(debt_store().list(user_token))))

    return app


if __name__ == "__main__":
    configure_logging()
    logger.info("Starting debt engine web app...")
    create_app().run(host="0.0.0.0", port=8710, debug=True)
