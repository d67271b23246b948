"""
PDF Service - generates documents from templates and variable contexts
"""
import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional, List, Callable, Mapping, Tuple

from models.data_models import DocumentMetadata, RenderedDocument
from services.document_assembler import DocumentAssembler, DocumentLayout
from services.section_renderer import SectionRenderer, RenderContext
from services.variable_resolver import VariableResolver
from shared.template_registry import TemplateRegistry

logger = logging.getLogger(__name__)


def compute_variables_hash(context: Mapping[str, Any]) -> str:
    """SHA-256 of the key-sorted JSON form of the context"""
    payload = json.dumps(context, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(payload.encode('utf-8')).hexdigest()


def variables_to_context(variables: List[Dict[str, Any]]) -> Dict[str, Any]:
    """[{key, value}, ...] -> {key: value}; later keys win"""
    return {item['key']: item.get('value') for item in variables}


class PDFService:
    def __init__(self, registry: TemplateRegistry,
                 resolver: Optional[VariableResolver] = None,
                 renderer: Optional[SectionRenderer] = None,
                 assembler: Optional[DocumentAssembler] = None,
                 clock: Optional[Callable[[], datetime]] = None,
                 page_size: Optional[Tuple[float, float]] = None,
                 logo_path: Optional[str] = None):
        self.registry = registry
        self.resolver = resolver or VariableResolver()
        self.renderer = renderer or SectionRenderer()
        self.assembler = assembler or DocumentAssembler()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.page_size = page_size
        self.logo_path = logo_path

    def check_context(self, category: str, context: Mapping[str, Any],
                      template_id: Optional[str] = None) -> List[str]:
        """Names the context is missing for the selected template (sorted)"""
        template = self.registry.get_template(category, template_id)
        return self.resolver.find_missing(template, context)

    def render_layout(self, category: str, context: Mapping[str, Any],
                      template_id: Optional[str] = None) -> Tuple[bytes, DocumentLayout, Any]:
        """Bytes, page layout and template of one render; nothing is produced on error"""
        template = self.registry.get_template(category, template_id)
        resolved = self.resolver.resolve(template, context)
        ctx = RenderContext.for_template(template, self.page_size, self.logo_path)
        sections = self.renderer.render_all(resolved, ctx)
        content, layout = self.assembler.assemble(ctx, sections, title=template.name, subject=category)
        return content, layout, template

    def generate_document(self, category: str, context: Mapping[str, Any],
                          template_id: Optional[str] = None) -> RenderedDocument:
        content, layout, template = self.render_layout(category, context, template_id)
        metadata = DocumentMetadata(
            page_count=layout.page_count,
            byte_size=len(content),
            generated_at=self.clock(),
            template_id=template.id,
            template_version=template.version,
            category=category,
            language=template.language,
            checksum=hashlib.sha256(content).hexdigest(),
            variables_hash=compute_variables_hash(context),
        )
        logger.info(
            f"Generated {category} document with template '{template.id}' v{template.version}: "
            f"{metadata.page_count} page(s), {metadata.byte_size} bytes"
        )
        return RenderedDocument(content=content, metadata=metadata)
