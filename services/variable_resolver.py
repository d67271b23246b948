"""
Binds a template to a variable context.

Resolution is fail-fast: every missing name is collected and reported in one
MissingVariables error before anything is substituted.
"""
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Dict, Any, List, Set, Tuple

from models.template_models import (
    DocumentTemplate,
    Section,
    SectionContent,
    TableContent,
    TableColumn,
    ROW_NUMBER_FIELD
)
from utils.errors import MissingVariables, TypeMismatch
from utils.placeholder_parser import parse_template_text


@dataclass(frozen=True)
class ResolvedSection:
    index: int  # position in the template's declaration order
    order: int
    content: SectionContent

    @property
    def type(self) -> str:
        return self.content.section_type


@dataclass(frozen=True)
class ResolvedDocument:
    template: DocumentTemplate
    sections: Tuple[ResolvedSection, ...]  # render order


def _type_name(value: Any) -> str:
    if isinstance(value, Mapping):
        return 'an object'
    if isinstance(value, (list, tuple)):
        return 'a list'
    return type(value).__name__


def _scalar_text(name: str, value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, (Mapping, list, tuple, set)):
        raise TypeMismatch(name, 'a scalar value', _type_name(value))
    return str(value)


class VariableResolver:
    """Substitutes placeholders and binds table data sources; pure, no side effects"""

    def required_variables(self, template: DocumentTemplate) -> Set[str]:
        return template.referenced_placeholders() | set(template.variables)

    def find_missing(self, template: DocumentTemplate, context: Mapping) -> List[str]:
        """Sorted names the context lacks, including names referenced inside table records"""
        missing = self.required_variables(template) - set(context)
        for section in template.sections:
            if not isinstance(section.content, TableContent):
                continue
            source = self._source_name(section.content)
            records = context.get(source)
            if isinstance(records, (list, tuple)):
                missing |= self._missing_in_records(records, context)
        return sorted(missing)

    def resolve(self, template: DocumentTemplate, context: Mapping) -> ResolvedDocument:
        missing = self.required_variables(template) - set(context)
        if missing:
            raise MissingVariables(missing)

        tables: Dict[int, List[Mapping]] = {}
        record_missing: Set[str] = set()
        for index, section in enumerate(template.sections):
            if isinstance(section.content, TableContent):
                records = self._records(section.content, context)
                record_missing |= self._missing_in_records(records, context)
                tables[index] = records
        if record_missing:
            raise MissingVariables(record_missing)

        def lookup(name: str) -> str:
            return _scalar_text(name, context[name])

        def substitute(text: str) -> str:
            return parse_template_text(text).render(lookup)

        resolved = []
        for index, section in self._ordered(template):
            content = section.content.map_text(substitute)
            if isinstance(content, TableContent):
                rows = self._bind_rows(content, tables[index], context)
                content = replace(content, rows=rows)
            resolved.append(ResolvedSection(index=index, order=section.order, content=content))
        return ResolvedDocument(template=template, sections=tuple(resolved))

    def _ordered(self, template: DocumentTemplate) -> List[Tuple[int, Section]]:
        return sorted(enumerate(template.sections), key=lambda pair: pair[1].order)

    def _source_name(self, table: TableContent) -> str:
        return parse_template_text(table.data_source).placeholders[0]

    def _records(self, table: TableContent, context: Mapping) -> List[Mapping]:
        name = self._source_name(table)
        value = context[name]
        if not isinstance(value, (list, tuple)):
            raise TypeMismatch(name, 'a list of records', _type_name(value))
        for i, record in enumerate(value):
            if not isinstance(record, Mapping):
                raise TypeMismatch(f"{name}[{i}]", 'an object', _type_name(record))
        return list(value)

    def _missing_in_records(self, records, context: Mapping) -> Set[str]:
        missing: Set[str] = set()
        for record in records:
            if not isinstance(record, Mapping):
                continue
            for value in record.values():
                if isinstance(value, str):
                    missing.update(n for n in parse_template_text(value, strict=False).placeholders
                                   if n not in context)
        return missing

    def _cell_text(self, value: Any, field: str, context: Mapping) -> str:
        if isinstance(value, str):
            return parse_template_text(value, strict=False).render(
                lambda name: _scalar_text(name, context[name])
            )
        return _scalar_text(field, value)

    def _bind_column(self, column: TableColumn, record: Mapping, row_number: int,
                     source: str, context: Mapping) -> str:
        for field in column.fields:
            if field == ROW_NUMBER_FIELD:
                return str(row_number)
            if field in record:
                return self._cell_text(record[field], f"{source}[{row_number - 1}].{field}", context)
        if column.default is not None:
            return column.default
        raise TypeMismatch(
            f"{source}[{row_number - 1}]",
            f"a record with field {' or '.join(repr(f) for f in column.fields)}",
            'a record without it'
        )

    def _bind_rows(self, table: TableContent, records: List[Mapping],
                   context: Mapping) -> Tuple[Tuple[str, ...], ...]:
        source = self._source_name(table)
        rows = []
        for i, record in enumerate(records):
            row_number = i + 1
            if table.columns:
                row = tuple(self._bind_column(c, record, row_number, source, context) for c in table.columns)
            else:
                if len(record) != len(table.headers):
                    raise TypeMismatch(
                        f"{source}[{i}]",
                        f"a record with {len(table.headers)} fields",
                        f"a record with {len(record)} fields"
                    )
                row = tuple(self._cell_text(v, f"{source}[{i}].{k}", context) for k, v in record.items())
            rows.append(row)
        return tuple(rows)

