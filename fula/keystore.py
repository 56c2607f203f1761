"""Storage of the account seed on local disk."""

import os

DEFAULT_SECRETS_DIR = "/internal/.secrets"
SEED_FILE_NAME = "secret_seed.txt"


class SimpleKeyStorer:
    """Save and load a single key in a file inside a secrets directory."""

    def __init__(self, db_path=""):
        if not db_path:
            db_path = DEFAULT_SECRETS_DIR
        if not os.path.exists(db_path):
            try:
                os.makedirs(db_path, mode=0o755, exist_ok=True)
            except OSError:
                db_path = os.environ.get("SECRETS_DIR") or "."
        self.db_path = db_path

    @property
    def _seed_path(self):
        return self.db_path + "/" + SEED_FILE_NAME

    def save_key(self, key):
        """Write the key, replacing any stored one."""
        descriptor = os.open(
            self._seed_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600
        )
        with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
            handle.write(key)

    def load_key(self):
        """Return the stored key with surrounding whitespace removed."""
        with open(self._seed_path, encoding="utf-8") as handle:
            return handle.read().strip()