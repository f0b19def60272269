"""ASGI entrypoint.

Importing this module builds the application; nothing else has side effects.
"""

from appkernel.bootstrap import create_app

app = create_app()
