"""
Content Gateway

Caching gateway in front of a JSON content API and a generative-text API:
- Resilient upstream calls (timeout, classified retries, exponential backoff)
- Two-tier cache-aside (Redis with in-process fallback)
- Record export to PDF, DOCX and RTF
"""

__version__ = "0.1.0"
