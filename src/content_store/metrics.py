"""Shared OTel metrics instruments for the content store."""

from opentelemetry import metrics

METER_NAME = "content_store"

meter = metrics.get_meter(METER_NAME)

posts_loaded_total = meter.create_counter(
    name="posts_loaded_total",
    description="Posts parsed and added to the store",
    unit="1",
)

posts_skipped_total = meter.create_counter(
    name="posts_skipped_total",
    description="Post files skipped during a non-strict load",
    unit="1",
)

post_lookups_total = meter.create_counter(
    name="post_lookups_total",
    description="Post lookups by identifier, labelled hit or miss",
    unit="1",
)
