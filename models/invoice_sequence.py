# models/invoice_sequence.py
from sqlalchemy import Column, Integer, String
from .base import Base


class InvoiceSequence(Base):
     """
     Counter row backing invoice numbers.

     The row is read with SELECT ... FOR UPDATE and incremented in the same
     transaction that inserts the invoice, so two concurrent activations can
     never draw the same number.
     """
     __tablename__ = "invoice_sequences"

     name = Column(String(50), primary_key=True)
     last_value = Column(Integer, default=0, nullable=False)

     def __repr__(self):
          return f"<InvoiceSequence(name='{self.name}', last_value={self.last_value})>"
