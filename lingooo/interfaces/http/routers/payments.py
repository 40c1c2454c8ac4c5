import structlog
from fastapi import APIRouter, Depends
from ....infrastructure.metrics import payment_intents_total
from ....infrastructure.payments import PaymentError, PaymentGateway, get_payment_gateway
from ..authz import require_token
from ..errors import internal_error
from ..schemas import PaymentIntentReq, PaymentIntentResp

logger = structlog.get_logger()

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResp)
def create_payment_intent(payload: PaymentIntentReq,
                          identifier: str = Depends(require_token),
                          gateway: PaymentGateway = Depends(get_payment_gateway)):
    try:
        client_secret = gateway.create_intent(payload.price)
    except PaymentError as e:
        payment_intents_total.labels(outcome="failed").inc()
        logger.error("payment_intent_failed", identifier=identifier, price=payload.price, error=str(e))
        raise internal_error()
    payment_intents_total.labels(outcome="created").inc()
    return PaymentIntentResp(clientSecret=client_secret)
