"""Bulletin (report card) PDF endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_can_view_student, get_current_user, require
from backend.app.models.enums import Trimester
from backend.app.models.user import User
from backend.app.schemas.bulletin import BulletinRequest
from backend.app.services import bulletin_service
from backend.app.services.access_policy import Action
from backend.app.services.bulletin_renderer import render_bulletin_pdf

router = APIRouter(prefix="/bulletins", tags=["bulletins"])

print_template = require(Action.PRINT_TEMPLATE)


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{student_id}/trimester/{trimester}/year/{academic_year}")
def bulletin_for_trimester(
    student_id: int,
    trimester: Trimester,
    academic_year: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_can_view_student(current_user, student_id)
    document = bulletin_service.build_bulletin_from_reports(db, student_id, trimester, academic_year)
    return _pdf_response(render_bulletin_pdf(document), f"bulletin_{student_id}.pdf")


@router.get("/{student_id}/academic-data/{academic_data_id}")
def bulletin_for_academic_data(
    student_id: int,
    academic_data_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_can_view_student(current_user, student_id)
    document = bulletin_service.build_bulletin_from_academic_data(db, student_id, academic_data_id)
    return _pdf_response(render_bulletin_pdf(document), f"bulletin_{student_id}.pdf")


@router.get("/{student_id}/template")
def bulletin_template(
    student_id: int,
    trimester: Trimester,
    academic_year: int,
    classe: Optional[str] = None,
    db: Session = Depends(get_db),
    _=Depends(print_template),
):
    document = bulletin_service.build_bulletin_template(db, student_id, trimester, academic_year, classe)
    return _pdf_response(render_bulletin_pdf(document), f"bulletin_template_{student_id}.pdf")


@router.get("/{student_id}/grid/year/{academic_year}")
def grid_bulletin(
    student_id: int,
    academic_year: int,
    classe: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_can_view_student(current_user, student_id)
    document = bulletin_service.build_grid_bulletin(db, student_id, academic_year, classe)
    return _pdf_response(render_bulletin_pdf(document), f"bulletin_grid_{student_id}.pdf")


@router.post("/render")
def render_bulletin(request: BulletinRequest, _=Depends(print_template)):
    document = bulletin_service.build_bulletin_from_request(request)
    return _pdf_response(render_bulletin_pdf(document), "bulletin.pdf")
