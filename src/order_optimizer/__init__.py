"""Order resolution and pickup sequencing service."""
