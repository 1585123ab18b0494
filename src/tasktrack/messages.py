"""User-facing message catalog.

Every string that reaches an API client goes through translate(), keyed by
a stable message id. The locale is chosen per deployment (TASKTRACK_LOCALE).
"""

DEFAULT_LOCALE = "en"

CATALOG: dict[str, dict[str, str]] = {
    "en": {
        "auth.registered": "Registration succeeded.",
        "auth.email_taken": "This email address is already in use.",
        "auth.invalid_credentials": "Incorrect email address or password.",
        "auth.unauthenticated": "Authentication required.",
        "auth.not_logged_in": "Not logged in.",
        "auth.invalid_token": "Invalid token.",
        "auth.user_not_found": "User not found.",
        "auth.logged_out": "Logged out.",
        "tasks.not_found": "Task not found.",
        "tasks.deleted": "Task deleted.",
        "tasks.bulk_updated": "Updated the status of {count} task(s).",
        "tasks.list_failed": "Failed to fetch tasks.",
        "tasks.get_failed": "Failed to fetch the task.",
        "tasks.create_failed": "Failed to create the task.",
        "tasks.update_failed": "Failed to update the task.",
        "tasks.delete_failed": "Failed to delete the task.",
        "tasks.bulk_failed": "Failed to update the tasks.",
        "validation.failed": "Invalid request.",
        "validation.required": "This field is required.",
        "validation.invalid": "Invalid value.",
        "validation.email_required": "Email address is required.",
        "validation.email": "Enter a valid email address.",
        "validation.password_required": "Password is required.",
        "validation.password_min": "Password must be at least {min} characters.",
        "validation.title_required": "Title is required.",
        "validation.title_max": "Title must be at most {max} characters.",
        "validation.content_max": "Content must be at most {max} characters.",
        "validation.not_null": "This field cannot be null.",
        "errors.not_found": "Not found.",
        "errors.method_not_allowed": "Method not allowed.",
        "errors.internal": "A server error occurred.",
    },
    "ja": {
        "auth.registered": "ユーザー登録が成功しました。",
        "auth.email_taken": "このメールアドレスは既に使用されています。",
        "auth.invalid_credentials": "メールアドレスまたはパスワードが正しくありません。",
        "auth.unauthenticated": "認証が必要です。",
        "auth.not_logged_in": "認証されていません。",
        "auth.invalid_token": "無効なトークンです。",
        "auth.user_not_found": "ユーザーが見つかりません。",
        "auth.logged_out": "ログアウトしました。",
        "tasks.not_found": "タスクが見つかりません。",
        "tasks.deleted": "タスクを削除しました。",
        "tasks.bulk_updated": "{count}件のタスクのステータスを更新しました。",
        "tasks.list_failed": "タスクの取得に失敗しました。",
        "tasks.get_failed": "タスクの取得に失敗しました。",
        "tasks.create_failed": "タスクの作成に失敗しました。",
        "tasks.update_failed": "タスクの更新に失敗しました。",
        "tasks.delete_failed": "タスクの削除に失敗しました。",
        "tasks.bulk_failed": "タスクの一括更新に失敗しました。",
        "validation.failed": "入力内容が正しくありません。",
        "validation.required": "この項目は必須です。",
        "validation.invalid": "値が正しくありません。",
        "validation.email_required": "メールアドレスは必須です。",
        "validation.email": "正しいメールアドレスを入力してください。",
        "validation.password_required": "パスワードは必須です。",
        "validation.password_min": "パスワードは{min}文字以上で入力してください。",
        "validation.title_required": "タイトルは必須です。",
        "validation.title_max": "タイトルは{max}文字以内で入力してください。",
        "validation.content_max": "説明は{max}文字以内で入力してください。",
        "validation.not_null": "この項目はnullにできません。",
        "errors.not_found": "見つかりません。",
        "errors.method_not_allowed": "許可されていないメソッドです。",
        "errors.internal": "サーバーエラーが発生しました。",
    },
}

SUPPORTED_LOCALES = frozenset(CATALOG)


def translate(key: str, locale: str = DEFAULT_LOCALE, **params) -> str:
    """Look up a message, falling back to English, then to the key itself."""
    catalog = CATALOG.get(locale, CATALOG[DEFAULT_LOCALE])
    template = catalog.get(key) or CATALOG[DEFAULT_LOCALE].get(key, key)
    return template.format(**params) if params else template
