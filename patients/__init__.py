"""Patient records application.

This package contains the patient model, the validation rules, the
entity/transfer mapping, the repository and service layers and the REST
views that expose them.
"""
