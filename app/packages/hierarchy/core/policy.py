"""角色权限策略：页面、设置标签与操作能力的唯一判定来源。

所有需要按角色隐藏页面/标签/按钮的地方都必须调用这里的函数，
不要在调用处再维护一份允许角色列表。

约定：
- 表中的角色键均为规范化后的大写形式（见 ``models.user.canonical_role``）；
- 未登记的角色、未登记的能力键、空用户或无角色用户一律视为无权限，不抛异常；
- 用户持有多个角色时，任一角色授予即视为授予。
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Union

from app.packages.hierarchy.core.enums import (
    ActionKeyEnum as A,
    PageKeyEnum as P,
    RoleEnum as R,
    SettingsTabKeyEnum as T,
)
from app.packages.hierarchy.models.user import CurrentUser, ingest_user

_OPERATIONAL_PAGES = (
    P.DASHBOARD,
    P.FOLLOW_UP,
    P.INSIGHT,
    P.REPORTING,
    P.INVESTIGATION,
    P.TREND_MONITORING,
    P.TABLE_VIEW,
    P.INSERT_RECORD,
    P.HISTORY,
    P.DRAWER_NOTES,
    P.DATA_MIGRATION,
    P.SETTINGS,
    P.CRITICAL_ISSUES,
)
_MONITORING_PAGES = (P.DASHBOARD, P.INBOX, P.FOLLOW_UP, P.TREND_MONITORING, P.CRITICAL_ISSUES)
_LIMITED_ADMIN_ROLES = (R.ADMINISTRATION_ADMIN, R.DEPARTMENT_ADMIN, R.SECTION_ADMIN, R.UNIVERSAL_SECTION)
_ACTING_ROLES = (
    R.SOFTWARE_ADMIN,
    R.ADMINISTRATION_ADMIN,
    R.DEPARTMENT_ADMIN,
    R.SECTION_ADMIN,
    R.COMPLAINT_SUPERVISOR,
    R.WORKER,
)


def _freeze(table: Mapping[R, Iterable[Any]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({role.value: frozenset(item.value for item in items) for role, items in table.items()})


def _invert(grants: Mapping[Any, Iterable[R]]) -> Mapping[R, list]:
    table: dict[R, list] = {}
    for capability, roles in grants.items():
        for role in roles:
            table.setdefault(role, []).append(capability)
    return table


PAGE_TABLE = _freeze(
    {
        R.SOFTWARE_ADMIN: (*_OPERATIONAL_PAGES, P.PERSON_REPORTING),
        R.COMPLAINT_SUPERVISOR: (*_OPERATIONAL_PAGES, P.INBOX),
        R.WORKER: (*_OPERATIONAL_PAGES, P.INBOX),
        **{role: _MONITORING_PAGES for role in _LIMITED_ADMIN_ROLES},
        R.COMPLAINT_DEPARTMENT_WORKER: (P.PERSON_REPORTING,),
    }
)

TAB_TABLE = _freeze(
    {
        R.SOFTWARE_ADMIN: tuple(T),
        R.COMPLAINT_SUPERVISOR: tuple(tab for tab in T if tab is not T.HARDWARE_CONFIG),
        R.WORKER: (T.DOCTORS, T.PATIENTS),
        **{role: () for role in _LIMITED_ADMIN_ROLES},
    }
)

ACTION_TABLE = _freeze(
    _invert(
        {
            A.ACT_ON_INBOX: _ACTING_ROLES,
            A.ACT_ON_FOLLOW_UP: _ACTING_ROLES,
            A.VIEW_INSIGHT_ACTIONS: (
                R.SOFTWARE_ADMIN,
                R.ADMINISTRATION_ADMIN,
                R.DEPARTMENT_ADMIN,
                R.SECTION_ADMIN,
                R.COMPLAINT_SUPERVISOR,
            ),
            A.GENERATE_SEASONAL_REPORTS: (R.SOFTWARE_ADMIN, R.ADMINISTRATION_ADMIN),
            A.PROVISION_SECTIONS: (R.SOFTWARE_ADMIN,),
            A.MANAGE_USERS: (R.SOFTWARE_ADMIN,),
        }
    )
)

UserLike = Union[CurrentUser, Mapping[str, Any], None]


def _key(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value.value if isinstance(value, (P, T, A, R)) else str(value)


def _lookup(table: Mapping[str, FrozenSet[str]], role: Any, capability: Any) -> bool:
    role_key = _key(role)
    capability_key = _key(capability)
    if not role_key or not capability_key:
        return False
    return capability_key in table.get(role_key, frozenset())


def can_role_see_page(role: Any, page_key: Any) -> bool:
    return _lookup(PAGE_TABLE, role, page_key)


def can_role_see_tab(role: Any, tab_key: Any) -> bool:
    return _lookup(TAB_TABLE, role, tab_key)


def can_role_perform(role: Any, action_key: Any) -> bool:
    return _lookup(ACTION_TABLE, role, action_key)


def _as_user(user: UserLike) -> Optional[CurrentUser]:
    if isinstance(user, CurrentUser):
        return user
    return ingest_user(user)


def _any_role(user: UserLike, table: Mapping[str, FrozenSet[str]], capability: Any) -> bool:
    current = _as_user(user)
    if current is None:
        return False
    return any(_lookup(table, role, capability) for role in current.roles)


def can_access_page(user: UserLike, page_key: Any) -> bool:
    """任一角色可见即可访问页面。"""
    return _any_role(user, PAGE_TABLE, page_key)


def can_access_tab(user: UserLike, tab_key: Any) -> bool:
    return _any_role(user, TAB_TABLE, tab_key)


def can_perform(user: UserLike, action_key: Any) -> bool:
    return _any_role(user, ACTION_TABLE, action_key)


def _granted(user: UserLike, table: Mapping[str, FrozenSet[str]], ordering: Iterable[Any]) -> list[str]:
    current = _as_user(user)
    if current is None:
        return []
    granted: set[str] = set()
    for role in current.roles:
        granted |= table.get(role, frozenset())
    return [item.value for item in ordering if item.value in granted]


def visible_pages(user: UserLike) -> list[str]:
    return _granted(user, PAGE_TABLE, P)


def visible_tabs(user: UserLike) -> list[str]:
    return _granted(user, TAB_TABLE, T)


def granted_actions(user: UserLike) -> list[str]:
    return _granted(user, ACTION_TABLE, A)
