"""Excepciones de dominio para la plataforma de reservas de proveedores."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores generales ===


class NotFoundError(DomainError):
    """El recurso solicitado no existe."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} no encontrado: {resource_id}",
            code="NOT_FOUND",
        )
        self.resource = resource
        self.resource_id = resource_id


class AuthorizationError(DomainError):
    """El solicitante no tiene permiso sobre el recurso."""

    def __init__(self, requester_id: str, operation: str):
        super().__init__(
            message=f"El usuario {requester_id} no está autorizado para {operation}",
            code="FORBIDDEN",
        )
        self.requester_id = requester_id
        self.operation = operation


class UnauthorizedError(DomainError):
    """La credencial del solicitante falta o no es válida."""

    def __init__(self, message: str = "Credencial ausente o inválida"):
        super().__init__(message=message, code="UNAUTHORIZED")


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validación fallida en '{field}': {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field


class OptimisticLockError(DomainError):
    """Conflicto de concurrencia al escribir un documento."""

    def __init__(self, resource: str, resource_id: str, expected_version: int, actual_version: int | None):
        super().__init__(
            message=f"Conflicto de concurrencia en {resource} {resource_id}: "
            f"versión esperada {expected_version}, versión actual {actual_version}",
            code="OPTIMISTIC_LOCK_ERROR",
        )
        self.resource = resource
        self.resource_id = resource_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class InvalidStatusTransitionError(DomainError):
    """La máquina de estados no permite la transición."""

    def __init__(self, machine: str, current_status: str, target_status: str):
        super().__init__(
            message=f"Transición de {machine} no permitida: '{current_status}' -> '{target_status}'",
            code="INVALID_STATUS_TRANSITION",
        )
        self.machine = machine
        self.current_status = current_status
        self.target_status = target_status


# === Errores de Reserva ===


class InvalidRangeError(DomainError):
    """Rango de tiempo inválido (inicio >= fin)."""

    def __init__(self, start_time: object, end_time: object):
        super().__init__(
            message=f"La hora de inicio debe ser anterior a la de fin: {start_time} >= {end_time}",
            code="INVALID_RANGE",
        )
        self.start_time = start_time
        self.end_time = end_time


class ConflictError(DomainError):
    """El intervalo solicitado se superpone con una reserva activa."""

    def __init__(self, listing_id: str):
        super().__init__(
            message=f"El horario solicitado no está disponible para el listing {listing_id}",
            code="TIME_SLOT_UNAVAILABLE",
        )
        self.listing_id = listing_id


class InactiveResourceError(DomainError):
    """El listing no está activo y no acepta reservas."""

    def __init__(self, listing_id: str, current_status: str):
        super().__init__(
            message=f"El listing {listing_id} no está activo (estado actual '{current_status}')",
            code="LISTING_INACTIVE",
        )
        self.listing_id = listing_id
        self.current_status = current_status


class AlreadyCancelledError(DomainError):
    """La reserva ya fue cancelada."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"La reserva {booking_id} ya está cancelada",
            code="ALREADY_CANCELLED",
        )
        self.booking_id = booking_id


class PastBookingError(DomainError):
    """No se puede cancelar una reserva cuyo inicio ya pasó."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"No se puede cancelar la reserva {booking_id}: ya comenzó",
            code="PAST_BOOKING",
        )
        self.booking_id = booking_id


class HasActiveBookingsError(DomainError):
    """El listing tiene reservas no canceladas."""

    def __init__(self, listing_id: str):
        super().__init__(
            message=f"No se puede eliminar el listing {listing_id}: tiene reservas activas",
            code="LISTING_HAS_ACTIVE_BOOKINGS",
        )
        self.listing_id = listing_id


# === Errores de Pago ===


class InvalidSignatureError(DomainError):
    """La firma del webhook no pudo verificarse."""

    def __init__(self, message: str = "Firma de webhook inválida"):
        super().__init__(message=message, code="INVALID_SIGNATURE")


class NoPaymentError(DomainError):
    """La reserva no tiene un pago registrado."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"No hay pago registrado para la reserva {booking_id}",
            code="NO_PAYMENT",
        )
        self.booking_id = booking_id


class NotPaidError(DomainError):
    """El estado de pago no permite reembolso."""

    def __init__(self, booking_id: str, payment_status: str):
        super().__init__(
            message=f"La reserva {booking_id} no está pagada (estado de pago '{payment_status}')",
            code="NOT_PAID",
        )
        self.booking_id = booking_id
        self.payment_status = payment_status


class ExternalProcessorError(DomainError):
    """El procesador de pagos rechazó la operación o no está disponible."""

    def __init__(self, operation: str, detail: str | None = None):
        super().__init__(
            message=f"Error del procesador de pagos en {operation}: {detail or 'no disponible'}",
            code="PAYMENT_PROCESSOR_ERROR",
        )
        self.operation = operation
        self.detail = detail
