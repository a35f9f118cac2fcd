"""Last-resort error boundary: any exception a view lets escape becomes a JSON 500."""

import logging
from django.http import JsonResponse

logger = logging.getLogger(__name__)


class JsonExceptionMiddleware:

	def __init__(self, get_response):
		self.get_response = get_response

	def __call__(self, request):
		return self.get_response(request)

	def process_exception(self, request, exception):
		logger.exception("unhandled error on %s %s", request.method, request.path)
		return JsonResponse({
			"error": "Something went wrong!",
			"message": str(exception),
		}, status=500)
