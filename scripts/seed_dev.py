from datetime import date

from sqlalchemy.orm import sessionmaker

from suenohincha.db.engine import make_engine
from suenohincha.gateway.sql import SqlGateway
from suenohincha.models import Base, Product, Seller, TvSerial
from suenohincha.types import (
    CampaignType,
    PurchaseIdentity,
    RegistrationStatus,
    SerialStatus,
)


def main() -> None:
    """Seed the development database with a small campaign."""
    engine = make_engine()

    # SQLite refuses DROP with live FKs, so switch enforcement off for the reset.
    with engine.connect() as conn:
        if engine.dialect.name == "sqlite":
            conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
        Base.metadata.drop_all(bind=conn)
        if engine.dialect.name == "sqlite":
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")
        conn.commit()

    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)

    with Session.begin() as session:
        uhd = Product(
            model_name="Skyworth 55\" UHD",
            model_key="55SUE9500",
            tier="T2",
            screen_size=55,
            points_value=20,
            ticket_multiplier=2,
        )
        qled = Product(
            model_name="Skyworth 65\" QLED",
            model_key="65SUE9600",
            tier="T3",
            screen_size=65,
            points_value=40,
            ticket_multiplier=4,
        )
        basic = Product(model_name="Skyworth 32\" HD", model_key="32STD4000", screen_size=32)
        session.add_all([uhd, qled, basic])
        session.flush()

        serials = [
            TvSerial(serial_number="2540415M00039", product_id=uhd.id),
            TvSerial(serial_number="2540415M00040", product_id=uhd.id),
            TvSerial(serial_number="2540415M00041", product_id=qled.id),
            TvSerial(serial_number="2540415M00042", product_id=qled.id),
            TvSerial(serial_number="2540415M00043", product_id=basic.id),
            TvSerial(
                serial_number="2540415M00099",
                product_id=basic.id,
                status=SerialStatus.BLOCKED.value,
            ),
            TvSerial(
                serial_number="2440101L00001",
                product_id=basic.id,
                campaign_type=CampaignType.LEGACY.value,
            ),
            TvSerial(
                serial_number="2540415M00050",
                product_id=uhd.id,
                seller_status=RegistrationStatus.REGISTERED.value,
            ),
        ]
        session.add_all(serials)

        seller = Seller(store_name="Electro Hogar Centro", store_city="La Paz", phone="70000001")
        session.add(seller)
        session.flush()

        gateway = SqlGateway(session)
        purchases = [
            ("2540415M00039", PurchaseIdentity("Ana Quispe", "4567890", "La Paz", "ana@example.com", "71234567")),
            ("2540415M00041", PurchaseIdentity("Luis Mamani", "5678901", "Cochabamba", "luis@example.com", "72345678")),
            ("2540415M00043", PurchaseIdentity("Rosa Flores", "6789012", None, "rosa@example.com", "73456789")),
        ]
        for serial_number, identity in purchases:
            gateway.register_buyer_serial(serial_number, identity, date(2026, 6, 1))

        gateway.register_seller_serial(
            str(seller.id), "2540415M00040", "Carlos Rojas", date(2026, 6, 2), invoice_number="F-0001"
        )
        gateway.register_seller_serial(
            str(seller.id), "2540415M00041", "Luis Mamani", date(2026, 6, 3)
        )

    print("Seeded development database.")


if __name__ == "__main__":
    main()
