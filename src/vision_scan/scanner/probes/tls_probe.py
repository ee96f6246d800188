"""TLS probe - fast handshake to read the served certificate.

We report certificate health, we don't enforce trust: verification is
turned off so expired and self-signed certificates can still be inspected.
"""

import asyncio
import logging
import ssl
from datetime import datetime

from cryptography import x509
from cryptography.x509.oid import NameOID

from vision_scan.util.types import ProbeOutcome, CertificateSummary
from vision_scan.util.time import now_utc, duration_ms

logger = logging.getLogger(__name__)


def _inspection_context() -> ssl.SSLContext:
    """SSL context that accepts any certificate (we want to inspect it, not validate it)."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def summarize_certificate(cert_der: bytes, now: datetime) -> CertificateSummary:
    """Parse a DER certificate into the fields we score on.

    days_remaining is floored, so a certificate that expired an hour ago is -1.
    """
    cert = x509.load_der_x509_certificate(cert_der)
    not_after = cert.not_valid_after_utc
    days_remaining = (not_after - now).days

    issuer = "Unknown"
    for oid in (NameOID.ORGANIZATION_NAME, NameOID.COMMON_NAME):
        attrs = cert.issuer.get_attributes_for_oid(oid)
        if attrs:
            issuer = str(attrs[0].value)
            break

    return CertificateSummary(days_remaining=days_remaining, issuer_organization=issuer)


class TLSProbe:
    """Async TLS handshake for certificate checks.

    Does a quick handshake to grab the peer certificate without an HTTP exchange.
    The domain is both the connect target and the SNI value.
    """

    def __init__(self, timeout: float = 4.0):
        """Initialize TLS probe with handshake timeout in seconds."""
        self.timeout = timeout

    async def probe(self, fqdn: str, port: int = 443) -> ProbeOutcome:
        """Perform TLS handshake and summarize the peer certificate.

        Returns ProbeOutcome with:
          - success, data=CertificateSummary if a certificate was offered
          - failure if the handshake failed or no certificate came back
          - timeout if the handshake didn't finish in time
        """
        start = now_utc()
        target = f"{fqdn}:{port}"

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(fqdn, port, ssl=_inspection_context(), server_hostname=fqdn),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.debug(f"TLS timeout for {target}")
            return ProbeOutcome.timeout(target, 'tls', duration_ms(start))
        except ssl.SSLError as e:
            # SSL errors are expected for bad configs - that's what we're measuring
            logger.debug(f"TLS SSL error for {target}: {e}")
            return ProbeOutcome.failure(target, 'tls', f"SSL error: {e}", duration_ms(start))
        except OSError as e:
            logger.debug(f"TLS connect error for {target}: {e}")
            return ProbeOutcome.failure(target, 'tls', f"Connect error: {e}", duration_ms(start))

        try:
            ssl_obj = writer.get_extra_info('ssl_object')
            cert_der = ssl_obj.getpeercert(binary_form=True) if ssl_obj else None

            if not cert_der:
                return ProbeOutcome.failure(target, 'tls', "No certificate offered", duration_ms(start))

            summary = summarize_certificate(cert_der, now_utc())
            logger.debug(f"TLS cert for {target}: {summary.days_remaining} days left, "
                         f"issuer {summary.issuer_organization}")
            return ProbeOutcome.success(target, 'tls', summary, duration_ms(start))

        except ValueError as e:
            logger.warning(f"Unparseable certificate from {target}: {e}")
            return ProbeOutcome.failure(target, 'tls', f"Certificate parse error: {e}", duration_ms(start))

        finally:
            # No application data was sent, so drop the connection without waiting on close_notify
            writer.transport.abort()
            try:
                await asyncio.wait_for(writer.wait_closed(), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.debug(f"TLS teardown for {target} did not finish in {self.timeout}s")
            except (OSError, ssl.SSLError) as e:
                logger.debug(f"Error closing TLS connection to {target}: {e}")
