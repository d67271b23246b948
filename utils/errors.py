"""
Error taxonomy for template lookup, binding and rendering
"""
from typing import Dict, Any, Iterable, Optional, List


class DocumentGenerationError(Exception):
    """Base class for every error raised by the rendering pipeline"""

    code = 'DocumentGenerationError'

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'message': str(self),
            'details': self.details()
        }


class TemplateValidationError(DocumentGenerationError):
    """A template definition is malformed (authoring-time defect)"""

    code = 'TemplateValidationError'

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.errors: List[str] = list(errors or [message])

    def details(self) -> Dict[str, Any]:
        return {'errors': self.errors}


class PlaceholderSyntaxError(TemplateValidationError):
    """A `{{...}}` placeholder could not be parsed"""

    code = 'PlaceholderSyntaxError'

    def __init__(self, text: str, position: int, reason: str):
        super().__init__(f"Invalid placeholder at offset {position} in {text!r}: {reason}")
        self.text = text
        self.position = position


class TemplateNotFound(DocumentGenerationError):
    code = 'TemplateNotFound'

    def __init__(self, category: str, template_id: Optional[str] = None):
        if template_id:
            message = f"Template '{template_id}' not found for category '{category}'"
        else:
            message = f"No templates registered for category '{category}'"
        super().__init__(message)
        self.category = category
        self.template_id = template_id

    def details(self) -> Dict[str, Any]:
        return {'category': self.category, 'templateId': self.template_id}


class NoDefaultTemplate(DocumentGenerationError):
    code = 'NoDefaultTemplate'

    def __init__(self, category: str):
        super().__init__(f"Category '{category}' has no active default template")
        self.category = category

    def details(self) -> Dict[str, Any]:
        return {'category': self.category}


class AmbiguousDefaultTemplate(DocumentGenerationError):
    code = 'AmbiguousDefault'

    def __init__(self, category: str, template_ids: Iterable[str]):
        self.template_ids = sorted(template_ids)
        super().__init__(
            f"Category '{category}' has {len(self.template_ids)} active default templates: "
            f"{', '.join(self.template_ids)}"
        )
        self.category = category

    def details(self) -> Dict[str, Any]:
        return {'category': self.category, 'templateIds': self.template_ids}


class MissingVariables(DocumentGenerationError):
    """The binding context lacks one or more required variables"""

    code = 'MissingVariables'

    def __init__(self, names: Iterable[str]):
        self.names = sorted(set(names))
        super().__init__(f"Missing template variables: {', '.join(self.names)}")

    def details(self) -> Dict[str, Any]:
        return {'missing': self.names}


class TypeMismatch(DocumentGenerationError):
    code = 'TypeMismatch'

    def __init__(self, field: str, expected: str, actual: str):
        super().__init__(f"Variable '{field}' should be {expected}, got {actual}")
        self.field = field
        self.expected = expected
        self.actual = actual

    def details(self) -> Dict[str, Any]:
        return {'field': self.field, 'expected': self.expected, 'actual': self.actual}


class SectionRenderError(DocumentGenerationError):
    """Layout of a single section failed; the whole document is aborted"""

    code = 'SectionRenderError'

    def __init__(self, section_index: int, section_type: str, cause: Exception):
        super().__init__(f"Section {section_index} ({section_type}) failed to render: {cause}")
        self.section_index = section_index
        self.section_type = section_type
        self.cause = cause

    def details(self) -> Dict[str, Any]:
        return {
            'sectionIndex': self.section_index,
            'sectionType': self.section_type,
            'cause': str(self.cause)
        }


class InvalidEntity(DocumentGenerationError):
    """A business entity cannot be turned into a binding context"""

    code = 'InvalidEntity'

    def __init__(self, category: str, reason: str):
        super().__init__(f"Invalid {category} entity: {reason}")
        self.category = category
        self.reason = reason

    def details(self) -> Dict[str, Any]:
        return {'category': self.category, 'reason': self.reason}
