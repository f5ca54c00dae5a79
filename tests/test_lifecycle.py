import boto3
import pytest
from botocore.stub import Stubber

from aiaio_core.errors import StorageError
from aiaio_core.storage import lifecycle


@pytest.fixture
def s3():
    return boto3.client("s3", region_name="us-east-1")


def test_rules_shape():
    ids = [r["ID"] for r in lifecycle.VIDEO_LIFECYCLE_RULES]
    assert ids == ["TransitionToIA", "DeleteIncompleteMultipartUploads"]
    transitions = lifecycle.VIDEO_LIFECYCLE_RULES[0]["Transitions"]
    assert [(t["Days"], t["StorageClass"]) for t in transitions] == [(30, "STANDARD_IA"), (90, "GLACIER")]

    temp_rule = next(r for r in lifecycle.ASSET_LIFECYCLE_RULES if r["ID"] == "DeleteOldTempAssets")
    assert temp_rule["Filter"] == {"Prefix": "temp/"}
    assert temp_rule["Expiration"] == {"Days": 30}
    # videos are only transitioned, never expired
    assert not any("Expiration" in r for r in lifecycle.VIDEO_LIFECYCLE_RULES)


def test_ensure_bucket_creates_missing_bucket_outside_us_east_1(s3):
    with Stubber(s3) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
        stubber.add_response(
            "create_bucket",
            {},
            {"Bucket": "videos", "CreateBucketConfiguration": {"LocationConstraint": "eu-west-1"}},
        )
        assert lifecycle.ensure_bucket(s3, "videos", "eu-west-1") is True
        stubber.assert_no_pending_responses()


def test_ensure_bucket_us_east_1_has_no_location_constraint(s3):
    with Stubber(s3) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="NotFound", http_status_code=404)
        stubber.add_response("create_bucket", {}, {"Bucket": "videos"})
        assert lifecycle.ensure_bucket(s3, "videos", "us-east-1") is True


def test_ensure_bucket_existing(s3):
    with Stubber(s3) as stubber:
        stubber.add_response("head_bucket", {}, {"Bucket": "videos"})
        assert lifecycle.ensure_bucket(s3, "videos", "us-east-1") is False


def test_bucket_exists_forbidden_is_an_error(s3):
    with Stubber(s3) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="403", http_status_code=403)
        with pytest.raises(StorageError):
            lifecycle.bucket_exists(s3, "videos")


def test_apply_lifecycle(s3):
    with Stubber(s3) as stubber:
        stubber.add_response(
            "put_bucket_lifecycle_configuration",
            {},
            {"Bucket": "assets", "LifecycleConfiguration": {"Rules": lifecycle.ASSET_LIFECYCLE_RULES}},
        )
        lifecycle.apply_lifecycle(s3, "assets", lifecycle.ASSET_LIFECYCLE_RULES)
        stubber.assert_no_pending_responses()
