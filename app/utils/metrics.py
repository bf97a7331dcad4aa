"""Prometheus metrics for document operations"""
from prometheus_client import Counter

documents_created = Counter(
    'documents_created_total',
    'Total number of documents created',
    ['type']  # text, file
)

documents_deleted = Counter(
    'documents_deleted_total',
    'Total number of documents deleted',
    ['type']
)

upload_rejections = Counter(
    'document_upload_rejections_total',
    'Total number of uploads rejected before a document was created',
    ['reason']  # invalid_type, too_large
)
