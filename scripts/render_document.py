#!/usr/bin/env python3
"""
Render a document from a JSON context file
Usage: python scripts/render_document.py price_offer context.json out.pdf [--template-id ID] [--entity]

With --entity the JSON file holds {"entity": ..., "client": ..., "lta": ...}
and the variables are built from it.
"""

import argparse
import json
import logging
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import LOGGING_CONFIG
from services.context_builders import build_context
from services.pdf_service import PDFService
from shared.template_registry import TemplateRegistry
from utils.errors import DocumentGenerationError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Render a document to PDF')
    parser.add_argument('category', help='price_offer, order, invoice or contract')
    parser.add_argument('context_file', help='JSON file with the variables')
    parser.add_argument('output', help='PDF path to write')
    parser.add_argument('--template-id', default=None)
    parser.add_argument('--entity', action='store_true', help='context file holds entity/client/lta')
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOGGING_CONFIG['level'], format=LOGGING_CONFIG['format'])

    with open(args.context_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    try:
        if args.entity:
            context = build_context(args.category, data['entity'], data['client'], data.get('lta'))
        else:
            context = data
        service = PDFService(TemplateRegistry.from_settings())
        document = service.generate_document(args.category, context, args.template_id)
    except (DocumentGenerationError, ValueError, KeyError) as e:
        print(f"❌ {type(e).__name__}: {e}")
        return 1

    with open(args.output, 'wb') as f:
        f.write(document.content)
    print(f"✅ {args.output}: {document.page_count} page(s), template {document.metadata.template_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
