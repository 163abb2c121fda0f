from django.dispatch import Signal

# Sent after a seller rejects a purchase request.
# Arguments: purchase_request
purchase_request_rejected = Signal()
