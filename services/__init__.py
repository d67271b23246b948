"""
Services package for document generation
"""
from .variable_resolver import VariableResolver, ResolvedDocument, ResolvedSection
from .section_renderer import SectionRenderer, RenderContext
from .document_assembler import DocumentAssembler, DocumentLayout, PageLayout, AssemblerState
from .pdf_service import PDFService, compute_variables_hash

__all__ = [
    'VariableResolver',
    'ResolvedDocument',
    'ResolvedSection',
    'SectionRenderer',
    'RenderContext',
    'DocumentAssembler',
    'DocumentLayout',
    'PageLayout',
    'AssemblerState',
    'PDFService',
    'compute_variables_hash'
]
