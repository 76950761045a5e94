"""内容节点模型。

Resource 表示页面中已解析的组件实例，ComponentDefinition 表示可继承的组件配置。
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class ComponentDefinition(BaseModel):
    """组件定义，支持父组件继承"""

    resource_type: str
    properties: dict[str, Any] = Field(default_factory=dict)
    super_component: "ComponentDefinition | None" = None


class Resource(BaseModel):
    """内容节点（组件实例）"""

    path: str = Field(min_length=1, description="节点路径")
    properties: dict[str, Any] = Field(default_factory=dict, description="实例属性")
    component: ComponentDefinition | None = Field(None, description="组件定义")
    parent: "Resource | None" = Field(None, description="父节点")

    @property
    def resource_type(self) -> str | None:
        return self.component.resource_type if self.component else None

    def get(self, name: str | None, default: Any = None) -> Any:
        """读取实例属性"""
        if not name:
            return default
        value = self.properties.get(name)
        return default if value is None else value


@runtime_checkable
class ComponentPropertyResolver(Protocol):
    """组件属性解析器（带继承语义）"""

    def get(self, resource: Resource, name: str, default: Any = None) -> Any: ...


class InheritingPropertyResolver:
    """按继承链解析组件属性

    查找顺序：组件定义及其父组件，然后是祖先节点的组件定义。
    实例属性不参与解析。
    """

    def get(self, resource: Resource, name: str, default: Any = None) -> Any:
        node: Resource | None = resource
        while node is not None:
            definition = node.component
            while definition is not None:
                value = definition.properties.get(name)
                if value is not None:
                    return value
                definition = definition.super_component
            node = node.parent
        return default
