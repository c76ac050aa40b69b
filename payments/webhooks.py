# ==================== PAYMENTS/WEBHOOKS.PY ====================
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST
import json
import logging

from utils.exceptions import InvalidStateError, NotFoundError
from .services import RazorpayService, PaymentService

logger = logging.getLogger(__name__)

EVENT_HANDLERS = {
    'payment.captured': PaymentService.handle_captured,
    'payment.failed': PaymentService.handle_failed,
}


@csrf_exempt
@require_POST
def razorpay_webhook(request):
    """Handle Razorpay payment webhooks

    Deliveries may be retried, so stale and duplicate events are
    acknowledged with 200 instead of failing.
    """
    webhook_signature = request.META.get('HTTP_X_RAZORPAY_SIGNATURE')
    if not RazorpayService().verify_webhook_signature(request.body, webhook_signature):
        logger.warning(f"Invalid webhook signature: {webhook_signature}")
        return JsonResponse({'status': 'invalid_signature'}, status=400)

    try:
        webhook_data = json.loads(request.body)
    except ValueError:
        return JsonResponse({'status': 'invalid_payload'}, status=400)

    event = webhook_data.get('event')
    payment_data = webhook_data.get('payload', {}).get('payment', {}).get('entity', {})

    handler = EVENT_HANDLERS.get(event)
    if handler is None:
        logger.info(f"Unhandled webhook event {event}")
        return JsonResponse({'status': 'ignored'})

    try:
        handler(payment_data)
    except (InvalidStateError, NotFoundError) as e:
        logger.warning(f"Webhook {event} for order {payment_data.get('order_id')} not applied: {e.detail}")
        return JsonResponse({'status': 'ignored', 'message': str(e.detail)})
    except Exception as e:
        logger.error(f"Webhook processing error: {str(e)}", exc_info=True)
        return JsonResponse({'status': 'error', 'message': str(e)}, status=500)

    return JsonResponse({'status': 'success'})
