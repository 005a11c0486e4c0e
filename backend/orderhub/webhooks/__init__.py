from orderhub.webhooks.ingress import Acknowledgement, WebhookIngress
from orderhub.webhooks.normalizer import build_order_payload

__all__ = ["Acknowledgement", "WebhookIngress", "build_order_payload"]
