from __future__ import annotations
from typing import Any, Dict, Optional

from fastapi import FastAPI, Form, HTTPException

from intentui.config import Config, load_config, validate_config
from intentui.core.classifier import classify
from intentui.core.ledger import Ledger
from intentui.core.sessions import SessionRegistry
from intentui.core.tracker import DensityTracker
from intentui.expenses import ExpenseBook, extract_prefill


def _run(reg: SessionRegistry, sid: str, fn) -> Dict[str, Any]:
    try:
        snap = reg.run(sid, fn)
    except KeyError:
        raise HTTPException(status_code=404, detail="unknown session")
    return snap.to_dict()


def create_app(cfg: Optional[Config] = None, book: Optional[ExpenseBook] = None) -> FastAPI:
    cfg = validate_config(cfg) if cfg is not None else load_config()
    ledger = Ledger(cfg.ledger_path) if cfg.ledger_path else None
    reg = SessionRegistry(cfg, ledger=ledger)
    book = book if book is not None else ExpenseBook()

    app = FastAPI(title="intentui")
    app.state.sessions = reg
    app.state.expenses = book
    app.state.ledger = ledger

    @app.post("/sessions")
    def create_session():
        sid = reg.create()
        return {"session_id": sid, **reg.get(sid).snapshot().to_dict()}

    @app.get("/sessions/{sid}")
    def get_session(sid: str):
        return _run(reg, sid, DensityTracker.snapshot)

    @app.delete("/sessions/{sid}")
    def end_session(sid: str):
        try:
            reg.end(sid)
        except KeyError:
            raise HTTPException(status_code=404, detail="unknown session")
        return {"ok": True}

    @app.post("/sessions/{sid}/input")
    def session_input(sid: str, text: str = Form("")):
        return _run(reg, sid, lambda t: t.process_input(text))

    @app.post("/sessions/{sid}/override")
    def session_override(sid: str, density: str = Form(...)):
        try:
            return _run(reg, sid, lambda t: t.set_manual_override(density))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/sessions/{sid}/success")
    def session_success(sid: str):
        return _run(reg, sid, DensityTracker.record_success)

    @app.post("/sessions/{sid}/hesitation")
    def session_hesitation(sid: str, count: int = Form(1)):
        try:
            return _run(reg, sid, lambda t: t.record_hesitation(count))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/classify")
    def classify_once(text: str = Form("")):
        return classify(text, cfg=cfg).to_dict()

    @app.get("/expenses")
    def list_expenses():
        return {
            "expenses": [e.to_dict() for e in book.entries()],
            "totals": book.totals_by_category(),
            "summary": book.summary(),
        }

    @app.post("/expenses/extract")
    def extract_expense(text: str = Form("")):
        return extract_prefill(text).to_dict()

    @app.post("/expenses")
    def add_expense(
        amount: float = Form(...),
        category: str = Form(...),
        merchant: str = Form(""),
        date: str = Form(""),
        session_id: str = Form(""),
    ):
        def _add():
            return book.add(amount, category, merchant=merchant, date=date or None)

        def _add_and_succeed(t: DensityTracker):
            return _add(), t.record_success()

        out: Dict[str, Any] = {}
        try:
            if session_id:
                e, snap = reg.run(session_id, _add_and_succeed)
                out["session"] = snap.to_dict()
            else:
                e = _add()
        except KeyError:
            raise HTTPException(status_code=404, detail="unknown session")
        except ValueError as err:
            raise HTTPException(status_code=400, detail=str(err))
        out["expense"] = e.to_dict()
        return out

    @app.post("/expenses/clear")
    def clear_expenses():
        book.clear()
        return {"ok": True}

    return app


app = create_app()
