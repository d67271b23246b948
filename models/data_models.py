"""
Data models for generated documents
"""
import re
from typing import Dict, Any
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata describing one generated document"""
    page_count: int
    byte_size: int
    generated_at: datetime
    template_id: str
    template_version: int
    category: str
    language: str
    checksum: str
    variables_hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pageCount': self.page_count,
            'byteSize': self.byte_size,
            'generatedAt': self.generated_at.isoformat(),
            'templateId': self.template_id,
            'templateVersion': self.template_version,
            'category': self.category,
            'language': self.language,
            'checksum': self.checksum,
            'variablesHash': self.variables_hash
        }


@dataclass(frozen=True)
class RenderedDocument:
    """PDF bytes plus metadata; ownership passes to the caller"""
    content: bytes
    metadata: DocumentMetadata

    @property
    def page_count(self) -> int:
        return self.metadata.page_count

    def suggested_filename(self, entity_id: str = 'doc') -> str:
        entity_id = re.sub(r'[^A-Za-z0-9_-]+', '-', entity_id) or 'doc'
        stamp = self.metadata.generated_at.strftime('%Y%m%d_%H%M%S')
        return f"{self.metadata.category}_{entity_id}_{stamp}.pdf"

    def to_dict(self) -> Dict[str, Any]:
        return self.metadata.to_dict()
