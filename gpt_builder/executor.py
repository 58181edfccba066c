import os
from concurrent.futures import ThreadPoolExecutor

# Shared pool for fan-out calls to the embedding endpoint.
executor = ThreadPoolExecutor(
    max_workers=int(os.getenv("EMBED_WORKERS", "8")),
    thread_name_prefix="embed",
)
