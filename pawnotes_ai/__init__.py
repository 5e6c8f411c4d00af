"""PawNotes AI functions.

Serverless request proxies behind the PawNotes note-taking app:
``gemini-ai`` (prompt modes), ``ai-summary`` and ``image-generator``.
"""

__version__ = "0.1.0"
