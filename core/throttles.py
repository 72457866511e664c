# core/throttles.py

from rest_framework.throttling import SimpleRateThrottle


class WindowedRateThrottle(SimpleRateThrottle):
    """
    SimpleRateThrottle that also understands multi-unit windows,
    e.g. "3/15m" = three requests per fifteen minutes.
    """
    UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        num, period = rate.split("/")
        digits = "".join(ch for ch in period if ch.isdigit())
        unit = period[len(digits):][:1]
        multiplier = int(digits) if digits else 1
        return (int(num), multiplier * self.UNITS[unit])


class ContactSubmitThrottle(WindowedRateThrottle):
    """
    Rate-limit the public contact form per client IP.

    Scope key: 'contact-submit'
    Cache key shape:
      throttle_contact-submit_<ip>
    """
    scope = "contact-submit"

    def get_cache_key(self, request, view):
        # Only throttle POST (form submission)
        if request.method != "POST":
            return None
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }
