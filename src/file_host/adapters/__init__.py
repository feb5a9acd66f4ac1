"""
Adapter layer for the file host.

Contains the bucket adapter (R2 / S3 via boto3) and the SQLite-backed
metadata index.
"""
