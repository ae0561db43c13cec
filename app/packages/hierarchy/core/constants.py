"""常量定义：HTTP 状态码与对外展示的固定文案。"""

HTTP_STATUS_OK = 200
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_CONFLICT = 409
HTTP_STATUS_UNPROCESSABLE_ENTITY = 422
HTTP_STATUS_INTERNAL_SERVER_ERROR = 500
HTTP_STATUS_BAD_GATEWAY = 502

SECTION_NAME_MIN_LENGTH = 2
SECTION_NAME_MAX_LENGTH = 100

# 上游固定的字段命名：无论父级是行政还是部门，请求体都使用该键
WIRE_PARENT_FIELD = "parent_department_id"
WIRE_SECTION_NAME_FIELD = "section_name"

SECTION_CREATION_FALLBACK_MESSAGE = "Section creation failed"
DELETE_USER_FALLBACK_MESSAGE = "Failed to delete user"
RECREATE_ADMIN_FALLBACK_MESSAGE = "Failed to recreate admin"
INVENTORY_UNAVAILABLE_MESSAGE = "Failed to load organizational units"
FIX_VALIDATION_MESSAGE = "Please fix validation errors before submitting"
SUBMISSION_IN_FLIGHT_MESSAGE = "A section creation request is already in progress"
SECTION_CREATED_MESSAGE = "Section and admin user created successfully!"
ADMIN_RECREATED_MESSAGE = "Section admin recreated successfully!"
PROTECTED_USER_MESSAGE = "Cannot delete SOFTWARE_ADMIN user"

CREDENTIALS_NOTICE = (
    "Credentials are shown once. Store them securely. "
    "The password cannot be retrieved again after this view is dismissed."
)
CREDENTIALS_ACKNOWLEDGE_LABEL = "Create Another Section"
