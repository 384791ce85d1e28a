"""
Label Print Service
===================

Prints label images on Brother QL printers through the brother_ql
command-line driver.

Jobs arrive two ways:
- Direct upload: the label format is resolved from the PNG's pixel size
- Queue drain: objects named <label>-<anything> in a cloud storage bucket

Usage:
    python -m label_print_service

API Endpoints:
    POST /print                - Upload and print a label image
    POST /drain                - Print everything in the remote queue
    GET  /status?label=<name>  - Printer model and connection state for a label
    GET  /health               - Health check
    GET  /api/formats          - Known label formats
"""

__version__ = '1.0.0'
__author__ = 'Label Print Service contributors'
