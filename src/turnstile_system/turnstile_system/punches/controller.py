from __future__ import annotations

import logging
import os

from flask import Flask, jsonify, request

from ..common.validators import optional_device_id, require_device_id
from ..common.web import admin_required, login_required, optional_bool, optional_date
from ..core.constants import EXCEL_EXTENSIONS
from ..core.enums import Period
from ..core.exceptions import ValidationError
from ..container import Container
from .model import RecordFilters, StoredPunchRecord
from .service import ImportSummary
from .workbook import read_device_export

logger = logging.getLogger(__name__)


def _fmt_time(value) -> str | None:
    return value.strftime("%H:%M:%S") if value else None


def record_to_json(r: StoredPunchRecord) -> dict:
    return {
        "id": r.record_id,
        "nome": r.person,
        "data": r.date.strftime("%Y-%m-%d"),
        "grupo_horario": r.period.value,
        "horario_entrada": _fmt_time(r.entry_time),
        "horario_saida": _fmt_time(r.exit_time),
        "minutos_total": r.duration_minutes,
        "catraca_entrada": r.entry_device,
        "catraca_saida": r.exit_device,
        "is_duplicado": r.is_duplicate,
        "arquivo_origem": r.source_labels,
        "observacoes": r.observation,
    }


def _summary_json(summary: ImportSummary) -> dict:
    return {
        "success": True,
        "message": f"{summary.total} registros processados com sucesso",
        "total": summary.total,
        "detalhes": {
            "pareados": summary.paired,
            "duplicados": summary.duplicates,
            "arquivos": summary.files,
        },
    }


def _uploaded(field: str):
    f = request.files.get(field)
    if f is None or not f.filename:
        return None
    if os.path.splitext(f.filename)[1].lower() not in EXCEL_EXTENSIONS:
        raise ValidationError("Apenas arquivos Excel (.xlsx) são permitidos")
    return f


def _parse_period(value: str | None) -> Period | None:
    if not value:
        return None
    try:
        return Period(value.strip().lower())
    except ValueError:
        raise ValidationError("grupo_horario inválido") from None


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        try:
            container.conn.ping()
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return jsonify({"status": "error", "database": "disconnected"}), 500
        return jsonify({"status": "ok", "database": "connected"})

    @app.route("/api/registros/upload", methods=["POST"], endpoint="upload_registros")
    @login_required
    def upload_registros():
        f = _uploaded("file")
        if f is None:
            raise ValidationError("Nenhum arquivo enviado")
        device_id = require_device_id(request.form.get("catracaId"))

        export = read_device_export(f.stream, source_label=f.filename, device_id=device_id)
        summary = container.punch_import_service.import_single(export, device_id=device_id)

        body = _summary_json(summary)
        body.update({"arquivo": f.filename, "catraca_id": device_id})
        return jsonify(body), 201

    @app.route("/api/registros/upload-consolidado", methods=["POST"], endpoint="upload_consolidado")
    @login_required
    def upload_consolidado():
        f1 = _uploaded("file1")
        f2 = _uploaded("file2")
        if f1 is None and f2 is None:
            raise ValidationError("Nenhum arquivo enviado")

        device1 = read_device_export(f1.stream, source_label=f1.filename, device_id=1) if f1 else None
        device2 = read_device_export(f2.stream, source_label=f2.filename, device_id=2) if f2 else None
        summary = container.punch_import_service.import_consolidated(device1, device2)
        return jsonify(_summary_json(summary)), 201

    @app.route("/api/registros", methods=["GET"], endpoint="listar_registros")
    @login_required
    def listar_registros():
        args = request.args
        filters = RecordFilters(
            name=(args.get("nome") or "").strip() or None,
            date=optional_date(args.get("data"), "data"),
            start_date=optional_date(args.get("data_inicial"), "data_inicial"),
            end_date=optional_date(args.get("data_final"), "data_final"),
            period=_parse_period(args.get("grupo_horario")),
            duplicates=optional_bool(args.get("duplicados")),
            device_id=optional_device_id(args.get("catraca_id")),
        )
        rows = container.punch_query_service.list_records(filters)
        return jsonify({"success": True, "total": len(rows), "registros": [record_to_json(r) for r in rows]})

    @app.route("/api/registros/indicadores", methods=["GET"], endpoint="indicadores")
    @login_required
    def indicadores():
        data = container.punch_query_service.indicators(
            work_date=optional_date(request.args.get("data"), "data"),
            device_id=optional_device_id(request.args.get("catraca_id")),
        )
        return jsonify({"success": True, "indicadores": data["indicators"], "total_geral": data["overall"]})

    @app.route("/api/registros/estatisticas", methods=["GET"], endpoint="estatisticas")
    @login_required
    def estatisticas():
        stats = dict(container.punch_query_service.statistics())
        for key in ("first_date", "last_date"):
            if stats.get(key) is not None:
                stats[key] = stats[key].strftime("%Y-%m-%d")
        return jsonify({"success": True, "estatisticas": stats})

    @app.route("/api/registros", methods=["DELETE"], endpoint="deletar_registros")
    @admin_required
    def deletar_registros():
        deleted = container.punch_query_service.delete_records(
            work_date=optional_date(request.args.get("data"), "data"),
            device_id=optional_device_id(request.args.get("catraca_id")),
        )
        return jsonify({"success": True, "message": f"{deleted} registros deletados", "deletados": deleted})
