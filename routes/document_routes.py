"""
API routes for templates and document generation
"""
import logging
from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from models.data_models import RenderedDocument
from services.context_builders import CONTEXT_BUILDERS, build_context
from services.pdf_service import PDFService, variables_to_context
from shared.template_registry import TemplateRegistry
from utils.errors import TemplateNotFound, InvalidEntity

logger = logging.getLogger(__name__)

router = APIRouter()


class VariableItem(BaseModel):
    key: str
    value: Any = None


class GenerateDocumentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str
    template_id: Optional[str] = Field(default=None, alias='templateId')
    variables: List[VariableItem] = Field(default_factory=list)


class EntityDocumentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity: Dict[str, Any]
    client: Dict[str, Any]
    lta: Optional[Dict[str, Any]] = None
    template_id: Optional[str] = Field(default=None, alias='templateId')


def get_registry(request: Request) -> TemplateRegistry:
    return request.app.state.registry


def get_pdf_service(request: Request) -> PDFService:
    return request.app.state.pdf_service


def pdf_response(document: RenderedDocument, entity_id: str = 'doc') -> Response:
    meta = document.metadata
    return Response(
        content=document.content,
        media_type='application/pdf',
        headers={
            'Content-Disposition': f'attachment; filename="{document.suggested_filename(entity_id)}"',
            'X-Page-Count': str(meta.page_count),
            'X-Template-Id': meta.template_id,
            'X-Template-Version': str(meta.template_version),
            'X-Generated-At': meta.generated_at.isoformat(),
            'X-Variables-Hash': meta.variables_hash
        }
    )


@router.get("/api/templates/categories")
async def list_categories(registry: TemplateRegistry = Depends(get_registry)):
    return {"categories": registry.list_categories()}


@router.get("/api/templates/{category}")
async def get_template(
    category: str,
    templateId: Optional[str] = Query(None, description="Exact template id; default template when omitted"),
    registry: TemplateRegistry = Depends(get_registry)
):
    return registry.get_template(category, templateId).to_dict()


@router.get("/api/templates/{category}/variables")
async def list_variables(category: str, registry: TemplateRegistry = Depends(get_registry)):
    return {
        "category": category,
        "variables": sorted(registry.list_variables(category))
    }


@router.post("/api/documents/generate")
async def generate_document(
    body: GenerateDocumentRequest,
    service: PDFService = Depends(get_pdf_service)
):
    """Render a document from an explicit variable list"""
    context = variables_to_context([v.model_dump() for v in body.variables])
    document = await run_in_threadpool(service.generate_document, body.category, context, body.template_id)
    return pdf_response(document)


@router.post("/api/documents/{category}/from-entity")
async def generate_from_entity(
    category: str,
    body: EntityDocumentRequest,
    service: PDFService = Depends(get_pdf_service)
):
    """Build the variables from a business entity, then render"""
    if category not in CONTEXT_BUILDERS:
        raise TemplateNotFound(category)
    try:
        context = build_context(category, body.entity, body.client, body.lta)
    except ValueError as e:
        raise InvalidEntity(category, str(e))

    document = await run_in_threadpool(service.generate_document, category, context, body.template_id)
    entity_id = str(body.entity.get('id') or context.get(f"{category.split('_')[-1]}Number") or 'doc')
    return pdf_response(document, entity_id)
