"""
HTTP client for the remote Department API.

The department store is owned by a separate service; this project only
mirrors it. All four operations go through DepartmentServiceClient:

- list_departments: GET    {base}/departments
- create_department: POST  {base}/departments
- update_department: PUT   {base}/departments/<id>
- delete_department: DELETE {base}/departments/<id>

Every failure (network, timeout, non-2xx, bad JSON) is raised as
DepartmentServiceError so callers have a single path to handle.
"""

import logging
from typing import Dict, List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class DepartmentServiceError(Exception):
    """
    A remote Department API call failed.

    Attributes:
        message: User-facing message from the API response body, or None
        status_code: HTTP status of the response, or None if none arrived
    """

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or 'Department API request failed')
        self.message = message
        self.status_code = status_code


def _extract_message(response) -> Optional[str]:
    """Pull the `message` field out of an error response body, if any."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get('message')
        if message:
            return str(message)
    return None


class DepartmentServiceClient:
    """Client to communicate with the Department API"""

    DEFAULT_TIMEOUT = 10  # seconds

    def __init__(self, base_url: str, token: str = '', timeout: int = DEFAULT_TIMEOUT, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})
        if token:
            self.session.headers.update({'Authorization': f'Bearer {token}'})

    @classmethod
    def from_settings(cls) -> 'DepartmentServiceClient':
        """Build a client from DEPARTMENT_API_* settings."""
        return cls(
            base_url=settings.DEPARTMENT_API_URL,
            token=getattr(settings, 'DEPARTMENT_API_TOKEN', ''),
            timeout=getattr(settings, 'DEPARTMENT_API_TIMEOUT', cls.DEFAULT_TIMEOUT),
        )

    def _request(self, method: str, path: str, **kwargs) -> Dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            if not response.content:
                return {}
            body = response.json()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.warning(f'{method} {url} failed with status {status_code}')
            raise DepartmentServiceError(_extract_message(e.response), status_code) from e
        except requests.RequestException as e:
            logger.error(f'{method} {url} failed: {e}')
            raise DepartmentServiceError() from e

        return body if isinstance(body, dict) else {}

    def list_departments(self) -> List[Dict]:
        """Fetch every department. Missing or null `data` means none."""
        body = self._request('GET', 'departments')
        return list(body.get('data') or [])

    def create_department(self, draft: Dict) -> Optional[str]:
        """Create a department, return the API's confirmation message."""
        body = self._request('POST', 'departments', json=_payload(draft))
        return body.get('message')

    def update_department(self, department_id, draft: Dict) -> Optional[str]:
        """Update a department by id, return the API's confirmation message."""
        body = self._request('PUT', f'departments/{department_id}', json=_payload(draft))
        return body.get('message')

    def delete_department(self, department_id) -> Optional[str]:
        """Delete a department by id, return the API's confirmation message."""
        body = self._request('DELETE', f'departments/{department_id}')
        return body.get('message')


def _payload(draft: Dict) -> Dict:
    return {
        'name': draft.get('name', ''),
        'code': draft.get('code', ''),
    }
