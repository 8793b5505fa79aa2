"""Point cloud streaming: bandwidth estimation, LoD selection, hull meshes, HTTP fetching and DASH manifests."""

__version__ = "0.1.0"