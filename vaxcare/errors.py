# vaxcare/errors.py


class VaxcareError(Exception):
    """Business rule failure; reported to the client as ``success: false``."""

    msg = "Request failed"

    def __init__(self, msg=None):
        if msg:
            self.msg = msg
        super().__init__(self.msg)


class MissingFields(VaxcareError):
    msg = "Missing fields"


class DuplicateEmail(VaxcareError):
    msg = "Email already exists"


class InvalidCredentials(VaxcareError):
    msg = "Invalid credentials"


class InvalidDate(VaxcareError):
    msg = "Invalid appointment date format"


class InvalidPatient(VaxcareError):
    msg = "Invalid patient record"


class OutOfStock(VaxcareError):
    msg = "Vaccine out of stock"


class AppointmentNotFound(VaxcareError):
    msg = "Appointment not found"
