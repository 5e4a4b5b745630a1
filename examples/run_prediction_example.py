"""Example: Running a model and following its progress.

This example shows the two ways to wait on a prediction: ``run`` raises
when the prediction fails, ``wait`` hands back whatever state it ended in.
Set REPLICATE_API_TOKEN (or put it in a .env file) before running.
"""

import logging

from replicate_client import ErrorLoggingClient, RunOptions, WaitOptions
from replicate_client.config import ReplicateConfig
from replicate_client.utils.exceptions import PredictionError


def main():
    logging.basicConfig(level=logging.INFO)

    # Log every failed call without changing how errors propagate
    client = ErrorLoggingClient(ReplicateConfig().create_client())

    print("Running meta/meta-llama-3-8b-instruct (latest version)...")
    options = RunOptions(
        input={"prompt": "Write a haiku about polling loops"},
        wait=WaitOptions(interval=0.5),
    )
    try:
        result = client.run(
            "meta/meta-llama-3-8b-instruct",
            options,
            progress=lambda p: print(f"  {p.id}: {p.status}"),
        )
    except PredictionError as e:
        print(f"Prediction did not succeed: {e}")
        return

    print(f"\nPrediction {result.id} output:")
    print("".join(result.output) if isinstance(result.output, list) else result.output)

    # Submit without waiting, then poll manually
    model = client.get_model("meta", "meta-llama-3-8b-instruct")
    prediction = client.create_prediction(model.latest_version.id, {"input": {"prompt": "Hi"}})
    prediction = client.wait(prediction, WaitOptions(interval=1))
    print(f"\nSecond prediction finished with status: {prediction.status}")


if __name__ == "__main__":
    main()
