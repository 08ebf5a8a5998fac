"""Implementation modules for ``lingyi_providers.base.cancellation``."""
