"""Estate Catalog: projects, their properties, and cross-project property search."""
