"""枚举定义：约束组织单元类型、角色以及页面/标签/操作键的可选值。"""

from enum import Enum


class OrgUnitTypeEnum(str, Enum):
    """组织单元层级：行政 → 部门 → 科室。"""

    ADMINISTRATION = "ADMINISTRATION"
    DEPARTMENT = "DEPARTMENT"
    SECTION = "SECTION"


class ParentTypeEnum(str, Enum):
    """新建科室时允许选择的父级类型。"""

    ADMINISTRATION = "ADMINISTRATION"
    DEPARTMENT = "DEPARTMENT"


class RoleEnum(str, Enum):
    """规范化（全大写）后的角色标识。"""

    SOFTWARE_ADMIN = "SOFTWARE_ADMIN"
    COMPLAINT_SUPERVISOR = "COMPLAINT_SUPERVISOR"
    ADMINISTRATION_ADMIN = "ADMINISTRATION_ADMIN"
    DEPARTMENT_ADMIN = "DEPARTMENT_ADMIN"
    SECTION_ADMIN = "SECTION_ADMIN"
    WORKER = "WORKER"
    UNIVERSAL_SECTION = "UNIVERSAL_SECTION"
    COMPLAINT_DEPARTMENT_WORKER = "COMPLAINT_DEPARTMENT_WORKER"


class PageKeyEnum(str, Enum):
    DASHBOARD = "dashboard"
    INBOX = "inbox"
    FOLLOW_UP = "follow_up"
    INSIGHT = "insight"
    REPORTING = "reporting"
    INVESTIGATION = "investigation"
    TREND_MONITORING = "trend_monitoring"
    TABLE_VIEW = "table_view"
    INSERT_RECORD = "insert_record"
    HISTORY = "history"
    DRAWER_NOTES = "drawer_notes"
    SETTINGS = "settings"
    CRITICAL_ISSUES = "critical_issues"
    DATA_MIGRATION = "data_migration"
    PERSON_REPORTING = "person_reporting"


class SettingsTabKeyEnum(str, Enum):
    DEPARTMENTS = "departments"
    DOCTORS = "doctors"
    PATIENTS = "patients"
    VARIABLE_ATTRIBUTES = "variable_attributes"
    POLICY = "policy"
    TRAINING = "training"
    USERS = "users"
    HARDWARE_CONFIG = "hardware_config"


class ActionKeyEnum(str, Enum):
    """页面内的操作能力（按钮级别）。"""

    ACT_ON_INBOX = "act_on_inbox"
    ACT_ON_FOLLOW_UP = "act_on_follow_up"
    VIEW_INSIGHT_ACTIONS = "view_insight_actions"
    GENERATE_SEASONAL_REPORTS = "generate_seasonal_reports"
    PROVISION_SECTIONS = "provision_sections"
    MANAGE_USERS = "manage_users"


class ProvisioningErrorKindEnum(str, Enum):
    """科室开通失败的分类。"""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    PERMISSION = "permission"
    MALFORMED = "malformed"
    TRANSPORT = "transport"
