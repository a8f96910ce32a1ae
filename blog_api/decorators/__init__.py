from blog_api.decorators.with_retry import with_retry

__all__ = ["with_retry"]
