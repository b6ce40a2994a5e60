"""Exceptions raised by the axion field propagation core."""


class AxionFieldError(Exception):
    """Base class for errors raised by axionfield."""


class MissingCollaboratorError(AxionFieldError):
    """A required collaborator (field sampler, conversion engine) is absent.

    Fatal for the current evaluation: no partial result is produced.
    """
