from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.permissions import IsOperatorOrReadOnly
from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.api.utils import resource_location
from apps.common import get_logger
from apps.common.pagination import PageRequest, page_response
from .commands import ProductWriteCommand
from .container import build_category_service, build_product_service
from .serializers import MAX_ID, CategorySerializer, ProductSerializer

logger = get_logger(__name__).bind(component="catalog", layer="view")

PRODUCT_SORT_FIELDS = {"id": "id", "name": "name", "price": "price", "date": "date"}
CATEGORY_SORT_FIELDS = {"id": "id", "name": "name"}

PAGING_PARAMETERS = [
    OpenApiParameter("page", int, required=False, description="1-based page number"),
    OpenApiParameter("size", int, required=False, description="Page size (max 100)"),
    OpenApiParameter("sort", str, required=False, description="field[,asc|desc]"),
]


class ProductFilterSerializer(serializers.Serializer):
    categoryId = serializers.IntegerField(
        min_value=0, max_value=MAX_ID, required=False, default=0
    )
    name = serializers.CharField(required=False, allow_blank=True, default="")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    permission_classes = [IsOperatorOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        parameters=PAGING_PARAMETERS
        + [
            OpenApiParameter(
                "categoryId", int, required=False, description="0 or absent: any category"
            ),
            OpenApiParameter(
                "name", str, required=False, description="Case-insensitive name fragment"
            ),
        ],
        responses={
            200: paginated_response(ProductSerializer),
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        filters = ProductFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        page_request = PageRequest.from_query_params(
            request.query_params, sortable=PRODUCT_SORT_FIELDS
        )
        category_id = filters.validated_data["categoryId"] or None
        name = filters.validated_data["name"].strip()
        self.log.debug(
            "Handling product list request", category_id=category_id, name=name
        )
        page = self.service.find_all(category_id, name, page_request)
        return page_response(request, page, ProductSerializer)

    @extend_schema(
        summary="Create product",
        request=ProductSerializer,
        responses={
            201: ProductSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cmd = ProductWriteCommand.from_raw(serializer.validated_data)
        self.log.info("Creating product via API", name=cmd.name)
        dto = self.service.insert(cmd)
        self.log.info("Product created via API", product_id=dto.id)
        return Response(
            ProductSerializer(dto).data,
            status=status.HTTP_201_CREATED,
            headers={
                "Location": resource_location(request, "api-products-detail", dto.id)
            },
        )


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    permission_classes = [IsOperatorOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={
            200: ProductSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        self.log.debug("Fetching product detail", product_id=product_id)
        return Response(ProductSerializer(self.service.find_by_id(product_id)).data)

    @extend_schema(
        summary="Replace product",
        request=ProductSerializer,
        responses={
            200: ProductSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, product_id: int):
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Replacing product", product_id=product_id)
        dto = self.service.update(
            product_id, ProductWriteCommand.from_raw(serializer.validated_data)
        )
        return Response(ProductSerializer(dto).data)

    @extend_schema(
        summary="Delete product",
        responses={
            204: None,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, product_id: int):
        self.log.info("Deleting product", product_id=product_id)
        self.service.delete(product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Catalog"])
class CategoryListView(APIView):
    permission_classes = [IsOperatorOrReadOnly]
    service = build_category_service()
    log = logger.bind(view="CategoryListView")

    @extend_schema(
        summary="List categories",
        parameters=PAGING_PARAMETERS,
        responses={
            200: paginated_response(CategorySerializer),
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        page_request = PageRequest.from_query_params(
            request.query_params, sortable=CATEGORY_SORT_FIELDS
        )
        self.log.debug("Listing categories", page=page_request.page)
        page = self.service.find_all(page_request)
        return page_response(request, page, CategorySerializer)

    @extend_schema(
        summary="Create category",
        request=CategorySerializer,
        responses={
            201: CategorySerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.insert(serializer.validated_data["name"])
        self.log.info("Category created", category_id=dto.id)
        return Response(
            CategorySerializer(dto).data,
            status=status.HTTP_201_CREATED,
            headers={
                "Location": resource_location(request, "api-categories-detail", dto.id)
            },
        )


@extend_schema(tags=["Catalog"])
class CategoryDetailView(APIView):
    permission_classes = [IsOperatorOrReadOnly]
    service = build_category_service()
    log = logger.bind(view="CategoryDetailView")

    @extend_schema(
        summary="Get category",
        parameters=[OpenApiParameter("category_id", int, OpenApiParameter.PATH)],
        responses={
            200: CategorySerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, category_id: int):
        self.log.debug("Fetching category detail", category_id=category_id)
        return Response(CategorySerializer(self.service.find_by_id(category_id)).data)

    @extend_schema(
        summary="Replace category",
        request=CategorySerializer,
        responses={
            200: CategorySerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, category_id: int):
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Replacing category", category_id=category_id)
        dto = self.service.update(category_id, serializer.validated_data["name"])
        return Response(CategorySerializer(dto).data)

    @extend_schema(
        summary="Delete category",
        responses={
            204: None,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, category_id: int):
        self.log.info("Deleting category", category_id=category_id)
        self.service.delete(category_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
