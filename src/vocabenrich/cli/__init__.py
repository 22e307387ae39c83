"""
Command-line interface entry points for vocab-enrich.

Entry points:
- vocab-enrich: Enrich vocabulary list files and export JSON
"""
