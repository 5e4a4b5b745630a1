"""API client for the Replicate inference platform."""

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

import requests

from replicate_client import __version__
from replicate_client.auth import AuthHandler, BearerTokenAuth
from replicate_client.types import (
    Account,
    Collection,
    Deployment,
    Model,
    ModelReference,
    Page,
    Prediction,
    PredictionStatus,
    RunOptions,
    RunResult,
    Training,
    WaitOptions,
    WebhookSigningSecret,
    is_active,
)
from replicate_client.utils.exceptions import (
    DecodeError,
    NotFoundError,
    PredictionCanceledError,
    PredictionFailedError,
    RequestError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.replicate.com/v1/"
USER_AGENT = f"replicate-client/{__version__}"

ProgressCallback = Callable[[Prediction], None]


def _is_running(prediction: Prediction) -> bool:
    # Unrecognized statuses keep the run loop going
    return not prediction.is_terminal


def _is_waiting(prediction: Prediction) -> bool:
    # Unrecognized statuses end a bare wait
    return is_active(prediction.status)


class ReplicateClient:
    """Client for the Replicate HTTP API.

    Holds the base URL, a static token and one ``requests.Session``. Every
    endpoint method composes a path and delegates to ``get``, ``post``,
    ``patch`` or ``delete``. ``run`` and ``wait`` poll predictions until they
    reach a terminal status.
    """

    def __init__(
        self,
        api_token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
        auth_handler: Optional[AuthHandler] = None,
    ):
        """Initialize the client.

        Args:
            api_token: Replicate API token (ignored when auth_handler is given)
            base_url: Base URL of the API
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
            auth_handler: Optional authentication handler
        """
        if auth_handler is None and api_token:
            auth_handler = BearerTokenAuth(api_token)

        self.base_url = base_url
        self.timeout = timeout
        self.auth_handler = auth_handler
        self.session = session or requests.Session()
        self.default_headers = {
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json",
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url='{self.base_url}')"

    # ------------------------------------------------------------------
    # Request primitives
    # ------------------------------------------------------------------

    def get(self, path: str, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Make a GET request.

        Args:
            path: API path relative to the base URL
            query: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            NotFoundError: If the API answers 404
            RequestError: If the request fails
            DecodeError: If the body is not a JSON object
        """
        response = self._request("GET", path, params=dict(query) if query else None)
        return self._decode(response, path)

    def post(
        self,
        path: str,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Make a POST request.

        Args:
            path: API path relative to the base URL
            data: JSON body
            headers: Additional headers for this request
            body: Raw string body, sent instead of ``data`` when given

        Returns:
            Decoded JSON response
        """
        if body is not None:
            response = self._request("POST", path, data=body.encode("utf-8"), headers=headers)
        else:
            response = self._request("POST", path, json=dict(data or {}), headers=headers)
        return self._decode(response, path)

    def patch(self, path: str, data: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Make a PATCH request with a JSON body."""
        response = self._request("PATCH", path, json=dict(data or {}))
        return self._decode(response, path)

    def delete(self, path: str) -> None:
        """Make a DELETE request. The response body is ignored."""
        self._request("DELETE", path)

    def _url(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    def _get_headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers = dict(self.default_headers)
        if self.auth_handler:
            headers.update(self.auth_handler.get_headers())
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self, method: str, path: str, headers: Optional[Mapping[str, str]] = None, **kwargs
    ) -> requests.Response:
        url = self._url(path)
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method,
                url,
                headers=self._get_headers(headers),
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code == 404:
                raise NotFoundError(path) from e
            raise RequestError(
                f"An error occurred while making the request: {e}", status_code=status_code
            ) from e
        except requests.RequestException as e:
            raise RequestError(f"An error occurred while making the request: {e}") from e

        return response

    @staticmethod
    def _decode(response: requests.Response, path: str) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON in response from {path}: {e}") from e

        if not isinstance(data, dict):
            raise DecodeError(
                f"Expected a JSON object in response from {path}, got {type(data).__name__}"
            )
        return data

    # ------------------------------------------------------------------
    # Run and wait
    # ------------------------------------------------------------------

    def run(
        self,
        identifier: str,
        options: Union[RunOptions, Mapping[str, Any]],
        progress: Optional[ProgressCallback] = None,
    ) -> RunResult:
        """Run a model prediction and wait for the output.

        Args:
            identifier: ``owner/name`` or ``owner/name:version``. Without a
                version the model's latest version is looked up first.
            options: RunOptions or the equivalent options mapping
            progress: Called with each polled Prediction snapshot

        Returns:
            RunResult with the prediction output and id

        Raises:
            ValidationError: If the identifier is malformed
            PredictionFailedError: If the prediction fails
            PredictionCanceledError: If the prediction is canceled
            RequestError: If any request fails
        """
        if not isinstance(options, RunOptions):
            options = RunOptions.from_dict(options)
        options.validate()

        ref = ModelReference.parse(identifier)
        version = ref.version or self._get_latest_version(ref.owner, ref.name)

        headers = {}
        if options.prefer_wait:
            headers["Prefer"] = "wait"

        prediction = Prediction.from_dict(
            self.post("predictions", options.to_payload(version), headers=headers)
        )
        logger.info("Created prediction %s for %s (%s)", prediction.id, ref, prediction.status)

        prediction = self._poll(prediction, options.poll_interval, progress, _is_running)

        if prediction.status == PredictionStatus.FAILED:
            raise PredictionFailedError(
                f"Prediction failed: {prediction.error or 'Unknown error'}", prediction
            )
        if prediction.status == PredictionStatus.CANCELED:
            raise PredictionCanceledError("Prediction was canceled", prediction)

        return RunResult(output=prediction.output, id=prediction.id)

    def wait(
        self,
        prediction: Union[Prediction, Mapping[str, Any]],
        options: Union[WaitOptions, Mapping[str, Any], None] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> Prediction:
        """Wait for a prediction to leave the starting and processing states.

        Unlike ``run``, failed and canceled predictions are returned rather
        than raised, and so is any status the client does not recognize.

        Args:
            prediction: Prediction or the raw prediction mapping
            options: WaitOptions or a mapping with an ``interval`` key
            progress: Called with each polled Prediction snapshot

        Returns:
            The latest Prediction snapshot
        """
        if not isinstance(prediction, Prediction):
            prediction = Prediction.from_dict(prediction)
        if not isinstance(options, WaitOptions):
            options = WaitOptions.from_dict(options)
        options.validate()

        return self._poll(prediction, options.interval, progress, _is_waiting)

    def _poll(
        self,
        prediction: Prediction,
        interval: float,
        progress: Optional[ProgressCallback],
        keep_polling: Callable[[Prediction], bool],
    ) -> Prediction:
        while keep_polling(prediction):
            time.sleep(interval)
            previous = prediction.status
            prediction = self.get_prediction(prediction.id)
            if prediction.status != previous:
                logger.debug("Prediction %s: %s -> %s", prediction.id, previous, prediction.status)

            if progress is not None:
                progress(prediction)

        logger.info("Prediction %s stopped polling with status %s", prediction.id, prediction.status)
        return prediction

    def _get_latest_version(self, owner: str, name: str) -> str:
        model = self.get_model(owner, name)
        if model.latest_version is None:
            raise NotFoundError(f"models/{owner}/{name} (no latest version)")
        return model.latest_version.id

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def create_prediction(
        self,
        version: str,
        options: Union[RunOptions, Mapping[str, Any]],
    ) -> Prediction:
        """Submit a prediction without waiting for it.

        Args:
            version: Model version id
            options: RunOptions or the equivalent options mapping

        Returns:
            The newly created Prediction
        """
        if not isinstance(options, RunOptions):
            options = RunOptions.from_dict(options)

        headers = {"Prefer": "wait"} if options.prefer_wait else None
        return Prediction.from_dict(
            self.post("predictions", options.to_payload(version), headers=headers)
        )

    def get_prediction(self, prediction_id: str) -> Prediction:
        """Get the current state of a prediction.

        Args:
            prediction_id: Prediction id

        Returns:
            Prediction snapshot
        """
        return Prediction.from_dict(self.get(f"predictions/{prediction_id}"))

    def list_predictions(self) -> Page[Prediction]:
        """List recent predictions, newest first.

        Returns:
            First page of predictions
        """
        return Page.from_dict(self.get("predictions"), Prediction.from_dict)

    def cancel_prediction(self, prediction_id: str) -> Prediction:
        """Cancel a prediction that is still running.

        Args:
            prediction_id: Prediction id

        Returns:
            The prediction as reported after cancellation
        """
        return Prediction.from_dict(self.post(f"predictions/{prediction_id}/cancel"))

    # ------------------------------------------------------------------
    # Models
    # ------------------------------------------------------------------

    def get_model(self, owner: str, name: str) -> Model:
        """Get a model, including its latest version.

        Args:
            owner: Model owner
            name: Model name

        Returns:
            Model
        """
        return Model.from_dict(self.get(f"models/{owner}/{name}"))

    def search_models(self, query: str) -> Page[Model]:
        """Search public models.

        Args:
            query: Free-text search, sent as a plain-text body

        Returns:
            First page of matching models
        """
        return Page.from_dict(
            self.post("models", headers={"Content-Type": "text/plain"}, body=query),
            Model.from_dict,
        )

    # ------------------------------------------------------------------
    # Deployments
    # ------------------------------------------------------------------

    def list_deployments(self) -> Page[Deployment]:
        """List deployments owned by the account.

        Returns:
            First page of deployments
        """
        return Page.from_dict(self.get("deployments"), Deployment.from_dict)

    def get_deployment(self, owner: str, name: str) -> Deployment:
        """Get a deployment.

        Args:
            owner: Deployment owner
            name: Deployment name

        Returns:
            Deployment
        """
        return Deployment.from_dict(self.get(f"deployments/{owner}/{name}"))

    def create_deployment(self, data: Mapping[str, Any]) -> Deployment:
        """Create a deployment.

        Args:
            data: Deployment definition (name, model, version, hardware,
                min_instances, max_instances)

        Returns:
            The created Deployment
        """
        return Deployment.from_dict(self.post("deployments", data))

    def update_deployment(self, owner: str, name: str, data: Mapping[str, Any]) -> Deployment:
        """Update a deployment.

        Args:
            owner: Deployment owner
            name: Deployment name
            data: Fields to change

        Returns:
            The updated Deployment
        """
        return Deployment.from_dict(self.patch(f"deployments/{owner}/{name}", data))

    def delete_deployment(self, owner: str, name: str) -> None:
        """Delete a deployment.

        Args:
            owner: Deployment owner
            name: Deployment name
        """
        self.delete(f"deployments/{owner}/{name}")

    def create_deployment_prediction(
        self, owner: str, name: str, options: Union[RunOptions, Mapping[str, Any]]
    ) -> Prediction:
        """Submit a prediction to a deployment.

        The deployment pins the version, so only input and webhook fields are
        sent.

        Args:
            owner: Deployment owner
            name: Deployment name
            options: RunOptions or the equivalent options mapping

        Returns:
            The newly created Prediction
        """
        if not isinstance(options, RunOptions):
            options = RunOptions.from_dict(options)

        payload: Dict[str, Any] = {"input": options.input}
        payload.update(options.webhook_payload())
        headers = {"Prefer": "wait"} if options.prefer_wait else None
        return Prediction.from_dict(
            self.post(f"deployments/{owner}/{name}/predictions", payload, headers=headers)
        )

    # ------------------------------------------------------------------
    # Trainings
    # ------------------------------------------------------------------

    def create_training(
        self, owner: str, name: str, version_id: str, data: Mapping[str, Any]
    ) -> Training:
        """Start a training from a model version.

        Args:
            owner: Model owner
            name: Model name
            version_id: Version to train from
            data: Training request (destination, input, webhook)

        Returns:
            The created Training
        """
        return Training.from_dict(
            self.post(f"models/{owner}/{name}/versions/{version_id}/trainings", data)
        )

    def list_trainings(self) -> Page[Training]:
        """List trainings.

        Returns:
            First page of trainings
        """
        return Page.from_dict(self.get("trainings"), Training.from_dict)

    def get_training(self, training_id: str) -> Training:
        """Get a training.

        Args:
            training_id: Training id

        Returns:
            Training
        """
        return Training.from_dict(self.get(f"trainings/{training_id}"))

    def cancel_training(self, training_id: str) -> None:
        """Cancel a training.

        Args:
            training_id: Training id
        """
        self.post(f"trainings/{training_id}/cancel")

    # ------------------------------------------------------------------
    # Collections, account and webhooks
    # ------------------------------------------------------------------

    def list_collections(self) -> Page[Collection]:
        """List collections.

        Returns:
            First page of collections
        """
        return Page.from_dict(self.get("collections"), Collection.from_dict)

    def get_collection(self, collection_slug: str) -> Collection:
        """Get a collection and its models.

        Args:
            collection_slug: Collection slug (e.g., 'text-to-image')

        Returns:
            Collection
        """
        return Collection.from_dict(self.get(f"collections/{collection_slug}"))

    def get_current_account(self) -> Account:
        """Get the account that owns the API token.

        Returns:
            Account
        """
        return Account.from_dict(self.get("account"))

    def get_webhook_signing_secret(self) -> WebhookSigningSecret:
        """Get the secret used to sign webhook payloads.

        Returns:
            WebhookSigningSecret
        """
        return WebhookSigningSecret.from_dict(self.get("webhooks/default/secret"))
