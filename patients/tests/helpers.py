from patients.schemas import PatientInput

DEFAULTS = {
    'first_name': 'John',
    'last_name': 'Doe',
    'address': '123 Main Street',
    'city': 'New York',
    'state': 'NY',
    'zip_code': '10001',
    'phone_number': '+1234567890',
    'email': 'john.doe@example.com',
}


def full_input(**overrides) -> PatientInput:
    return PatientInput(**{**DEFAULTS, **overrides})
