"""Service layer: core operations wrapped in the ServiceResult contract."""
