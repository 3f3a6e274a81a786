"""
Storage layer: path resolution, metadata, errors and the blob service client.
"""
